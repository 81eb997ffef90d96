"""Infrastructure layer: storage tiers, instance resolution, monitoring."""
