"""
Template builder engine: variables, formatting, validation, model, preview
and wizard. Import the submodules directly.
"""
