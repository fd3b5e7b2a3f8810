"""
Embedding validation and textual wire codec.

Stored embeddings travel as '[v1,v2,...]' strings, the literal form
accepted by pgvector columns. Encoding uses the shortest repr that
round-trips, so decode(encode(v)) == v exactly.

Dependencies: math (stdlib), edu_rag.core.exceptions
System role: Guards every vector entering search or storage
"""

import math
from collections.abc import Sequence
from numbers import Real

from edu_rag.core.exceptions import InvalidEmbeddingError


class EmbeddingCodec:
    """Validates and (de)serialises embeddings of a fixed dimension."""

    def __init__(self, dimension: int = 1536):
        if dimension < 1:
            raise ValueError("dimension must be positive")
        self.dimension = dimension

    def validate(self, vector: object) -> bool:
        """
        Check that a vector is usable for similarity scoring.

        Args:
            vector: Candidate embedding

        Returns:
            bool: True iff vector is a sequence of finite real numbers of the configured length
        """
        if isinstance(vector, (str, bytes)) or not isinstance(vector, Sequence):
            return False
        if len(vector) != self.dimension:
            return False
        for value in vector:
            if isinstance(value, bool) or not isinstance(value, Real):
                return False
            if not math.isfinite(value):
                return False
        return True

    def require_valid(self, vector: object, field: str = "embedding") -> list[float]:
        """
        Validate a vector, raising instead of returning False.

        Args:
            vector: Candidate embedding
            field: Name reported in the error

        Returns:
            list[float]: The vector as plain floats

        Raises:
            InvalidEmbeddingError: If the vector fails validation
        """
        if not self.validate(vector):
            actual = len(vector) if isinstance(vector, Sequence) else None
            raise InvalidEmbeddingError(
                f"Invalid {field}: expected {self.dimension} finite numbers",
                field=field,
                details={"expected_dimension": self.dimension, "actual_dimension": actual},
            )
        return [float(value) for value in vector]

    def encode(self, vector: Sequence[float]) -> str:
        """
        Serialise a validated vector to its wire form.

        Raises:
            InvalidEmbeddingError: If the vector fails validation
        """
        values = self.require_valid(vector)
        return "[" + ",".join(repr(value) for value in values) + "]"

    def decode(self, text: str) -> list[float]:
        """
        Parse the wire form back into a vector.

        Raises:
            InvalidEmbeddingError: If the text is malformed or the decoded vector is invalid
        """
        if not isinstance(text, str):
            raise InvalidEmbeddingError("Encoded embedding must be a string", field="embedding")

        stripped = text.strip()
        if len(stripped) < 2 or stripped[0] != "[" or stripped[-1] != "]":
            raise InvalidEmbeddingError(
                "Encoded embedding must be enclosed in brackets",
                field="embedding",
                details={"preview": stripped[:40]},
            )

        body = stripped[1:-1].strip()
        if not body:
            values: list[float] = []
        else:
            try:
                values = [float(part) for part in body.split(",")]
            except ValueError as e:
                raise InvalidEmbeddingError(
                    f"Encoded embedding contains a non-numeric element: {e}",
                    field="embedding",
                ) from e

        return self.require_valid(values)
