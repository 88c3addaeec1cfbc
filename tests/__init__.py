"""
appforge test suite
===================

Test Modules
------------
- test_models.py: Pydantic request and settings models
- test_placeholders.py: Marker substitution and name derivations
- test_registry.py: Template catalog and asset lookup
- test_generator.py: Project generation
- test_add_tool.py: Tool scaffolding insertion
- test_validator.py: Validation checklist
- test_operations.py: Boundary operations
- test_cli.py: Command-line interface

Running Tests
-------------
    # Run all tests
    pytest

    # Run specific module
    pytest tests/test_validator.py

    # Run specific test class
    pytest tests/test_generator.py::TestGenerateProject
"""
