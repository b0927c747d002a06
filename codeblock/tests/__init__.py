"""Define all tests for codeblock itself."""
