"""Build pass: rewrite call sites into embedded literals or runtime reads."""

from .callsites import CallSite, SourceSpan, scan_callsites
from .config import BuildConfig, LoadMode, load_config
from .expander import ExpandedModule, expand_file, expand_source
from .selector import Replacement, select
from .tree import BuildReport, build_tree

__all__ = [
    "BuildConfig",
    "BuildReport",
    "CallSite",
    "ExpandedModule",
    "LoadMode",
    "Replacement",
    "SourceSpan",
    "build_tree",
    "expand_file",
    "expand_source",
    "load_config",
    "scan_callsites",
    "select",
]
