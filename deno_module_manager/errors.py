"""
Exceptions raised by the module manager.
"""


class ModuleManagerError(Exception):
    """Base module manager exception."""


class ManifestNotFound(ModuleManagerError, FileNotFoundError):
    """Manifest file is missing or cannot be read."""


class NoMatchingModules(ModuleManagerError):
    """None of the requested modules are declared in the manifest."""


class ResolutionError(ModuleManagerError):
    """Latest release or repository could not be determined for a module."""


class ParseAmbiguity(ModuleManagerError):
    """A deno.land import line did not match a known layout."""


class RewriteMismatch(ModuleManagerError):
    """A module's version anchor was not found in the manifest text."""
