"""Transport adapters exposing the operation dispatcher."""
