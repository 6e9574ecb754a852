"""Integrations exposing connection resolvers to query layers."""
