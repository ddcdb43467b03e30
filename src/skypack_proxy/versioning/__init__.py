"""Reference classification, resolvers and resolution service."""
