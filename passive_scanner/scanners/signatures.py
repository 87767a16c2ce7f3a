"""
Built-in registry of front-end libraries recognised by the library checker.

Each signature's pattern is matched against script filenames. Group 1, when it
participates in the match, is the version embedded in the filename.

Keys are lowercase library tokens; the inline banner scan matches a banner's
library name against them by substring. The table is read-only for the
lifetime of the process.
"""
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class LibrarySignature:
    name: str
    pattern: re.Pattern
    latest_version: str
    advisory_url: str


def _optional_version(token: str) -> re.Pattern:
    return re.compile(token + r"(?:[.-]([0-9.]+))?(?:\.min)?\.js", re.I)


LIBRARY_SIGNATURES: Mapping[str, LibrarySignature] = MappingProxyType({
    # jQuery filenames without a version are too common (jquery.js bundles) to report
    "jquery": LibrarySignature(
        "jQuery",
        re.compile(r"jquery[.-]([0-9.]+)(?:\.min)?\.js", re.I),
        "3.7.1",
        "https://jquery.com/",
    ),
    "angular": LibrarySignature("AngularJS", _optional_version("angular"), "1.8.3", "https://angularjs.org/"),
    "react": LibrarySignature("React", _optional_version("react"), "18.2.0", "https://reactjs.org/"),
    "vue": LibrarySignature("Vue.js", _optional_version("vue"), "3.4.0", "https://vuejs.org/"),
    "bootstrap": LibrarySignature("Bootstrap", _optional_version("bootstrap"), "5.3.2", "https://getbootstrap.com/"),
    "lodash": LibrarySignature("Lodash", _optional_version("lodash"), "4.17.21", "https://lodash.com/"),
    "moment": LibrarySignature("Moment.js", _optional_version("moment"), "2.30.0", "https://momentjs.com/"),
    "backbone": LibrarySignature("Backbone.js", _optional_version("backbone"), "1.4.1", "https://backbonejs.org/"),
    "underscore": LibrarySignature("Underscore.js", _optional_version("underscore"), "1.13.6", "https://underscorejs.org/"),
})
