"""Pure domain algorithms: tally, blip resolution, comment trees, locks."""
