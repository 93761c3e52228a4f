"""
Import Fixer Package.

The resolution passes of the engine, in pipeline order:
1.  **Extraction** (`extractor`): unresolved selector bases and their members.
2.  **Sibling filtering** (`siblings`): names declared by same-package files.
3.  **Standard library** (`stdlib`): the immutable registry of CUE packages.
4.  **Local module** (`local`, `module_root`): packages of the enclosing module.
5.  **Synthesis** (`synthesizer`): the final, grouped import declaration.
"""

from cue_imports.core.import_fixer.extractor import extract_unresolved, selector_bases
from cue_imports.core.import_fixer.local import LocalModuleResolver
from cue_imports.core.import_fixer.module_root import ModuleRoot, find_module_root
from cue_imports.core.import_fixer.siblings import filter_sibling_declarations
from cue_imports.core.import_fixer.stdlib import STDLIB, is_stdlib_path, resolve_in_stdlib
from cue_imports.core.import_fixer.synthesizer import ImportBlock, ImportSynthesizer, unused_imports
from cue_imports.core.import_fixer.types import ImportReq, ResolvedMap, UnresolvedSet

__all__ = [
  "STDLIB",
  "ImportBlock",
  "ImportReq",
  "ImportSynthesizer",
  "LocalModuleResolver",
  "ModuleRoot",
  "ResolvedMap",
  "UnresolvedSet",
  "extract_unresolved",
  "filter_sibling_declarations",
  "find_module_root",
  "is_stdlib_path",
  "resolve_in_stdlib",
  "selector_bases",
  "unused_imports",
]
