"""Code generation: type rendering, generics, match patterns, derived methods, index types."""
