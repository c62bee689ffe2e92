"""Core funnel primitives: channel, normalizer, wrapper, guard."""
