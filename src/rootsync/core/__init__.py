"""Config, models, exceptions and scenario loading."""
