"""Repository inspectors feeding version resolution."""
