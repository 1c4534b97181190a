"""Domain layer: cart lines, pricing, checkout steps and order records."""
