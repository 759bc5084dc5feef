"""
Test suite for Parker

unit/         domain objects, pricing, validators, configuration, event bus
integration/  application service, command layer and command-line entry point
"""
