"""Unit tests for the domain layer and its supporting modules"""
