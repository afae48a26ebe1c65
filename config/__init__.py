"""Runtime configuration for Spyfall Party, read from the environment."""
