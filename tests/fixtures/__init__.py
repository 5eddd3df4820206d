"""Reusable test fixtures and graph builders."""
