"""Game-side combat logic: entities, resolvers and managers."""
