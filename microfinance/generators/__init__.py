"""Faker-backed synthetic data generators."""
