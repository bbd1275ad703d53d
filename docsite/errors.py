"""Conditions that abort a documentation build."""

from __future__ import annotations


class DocsBuildError(Exception):
    """Base class. A corpus with broken links or missing assets is not publishable."""


class MissingReferenceError(DocsBuildError):
    def __init__(self, target: str, document: str = ""):
        self.target = target
        self.document = document
        where = f" (referenced from '{document}')" if document else ""
        super().__init__(f"Referenced file not found: '{target}'{where}")


class DisallowedLinkTargetError(DocsBuildError):
    def __init__(self, target: str, document: str = ""):
        self.target = target
        self.document = document
        where = f" in '{document}'" if document else ""
        super().__init__(
            f"Link to '{target}'{where}: only markdown, image and csv files can be linked"
        )


class MalformedDocumentNameError(DocsBuildError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Malformed document name: '{name}' (expected '<name>.md')")


class MissingAssetError(DocsBuildError):
    pass


class ExternalToolError(DocsBuildError):
    pass


class DuplicatePageError(DocsBuildError):
    def __init__(self, page: str, names):
        self.page = page
        self.names = sorted(names)
        listed = ", ".join(f"'{n}'" for n in self.names)
        super().__init__(f"Documents {listed} all generate page '{page}'")
