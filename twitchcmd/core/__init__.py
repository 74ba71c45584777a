"""Client core: configuration, access checks, rate limiting, events and dispatch."""
