from __future__ import annotations


class MdsiteError(Exception):
    pass


class BuildError(MdsiteError):
    pass


class SlugCollisionError(BuildError):
    def __init__(self, page: str, tag: str):
        super().__init__(f"page '{page}' has same name as tag directory '{tag}'")
        self.page = page
        self.tag = tag


class DuplicateSlugError(BuildError):
    def __init__(self, first: str, second: str, slug: str):
        super().__init__(f"pages '{first}' and '{second}' both map to '{slug}'")
        self.first = first
        self.second = second
        self.slug = slug


class ReservedNameError(BuildError):
    def __init__(self, page: str, name: str):
        if name:
            message = f"page '{page}' has same name as listing page '{name}'"
        else:
            message = f"page '{page}' has no letters or digits to build a file name from"
        super().__init__(message)
        self.page = page
        self.name = name
