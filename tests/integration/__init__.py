"""
Integration tests for Parker

These tests verify the layers work together:
1. Application service over a real registry and event bus
2. Command lines run through the CommandInvoker
3. The command-line entry point reading input files
"""
