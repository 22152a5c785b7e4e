"""Addon discovery, ordering and provider chain execution."""
from .api import (
    Capabilities,
    CompletionFunctionParams,
    DefinitionFunctionParams,
    Operation,
    ProjectProviders,
    ReferenceFunctionParams,
)
from .chain import query_addons_api_chain
from .dag import AddonOrderingCycleError, OrderedExtensionGraph
from .provider import AddonDescriptor, AddonLoadError, Provider
from .resolver import ExtensionResolver, init_builtin_providers

__all__ = [
    'AddonDescriptor',
    'AddonLoadError',
    'AddonOrderingCycleError',
    'Capabilities',
    'CompletionFunctionParams',
    'DefinitionFunctionParams',
    'ExtensionResolver',
    'Operation',
    'OrderedExtensionGraph',
    'ProjectProviders',
    'Provider',
    'ReferenceFunctionParams',
    'init_builtin_providers',
    'query_addons_api_chain',
]
