"""API subpackage - FastAPI application exposing pricing and checkout quotes."""
