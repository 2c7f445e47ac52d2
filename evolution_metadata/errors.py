from __future__ import annotations


class MetadataError(Exception):
    """Base error for evolution metadata shaping."""


class DecodeError(MetadataError):
    MISSING_DISCRIMINATOR = "missing_discriminator"
    MISSING_FIELD = "missing_field"

    def __init__(self, message: str, *, kind: str, field: str | None = None):
        super().__init__(message)
        self.kind = kind
        self.field = field

    @classmethod
    def missing_discriminator(cls, key: str = "state") -> "DecodeError":
        return cls(f"Missing status discriminator '{key}'.", kind=cls.MISSING_DISCRIMINATOR, field=key)

    @classmethod
    def missing_field(cls, name: str, state: str) -> "DecodeError":
        return cls(f"Status '{state}' requires string field '{name}'.", kind=cls.MISSING_FIELD, field=name)


class RewriteError(MetadataError):
    def __init__(self, message: str, *, line_no: int | None = None):
        super().__init__(message)
        self.line_no = line_no
