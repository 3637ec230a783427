"""Randomised test data and request payload builders."""
