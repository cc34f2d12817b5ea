"""Mesh, material and draw data shared between model loading and rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np

_FNV_OFFSET_BASIS = 14695981039346656037
_FNV_PRIME = 1099511628211
_MASK64 = (1 << 64) - 1
_TEXEL_SIZE = 4  # one BGRA texel

INVALID_TEXTURE_HASH = "INVALID EMBEDDED TEXTURE"


@dataclass
class MeshInstanceData:
    """Per-instance data: model matrix and which submesh and material to use."""

    model_matrix: np.ndarray = field(default_factory=lambda: np.identity(4))
    sub_mesh_id: int = 0
    material_id: int = 0
    flags: int = 0
    object_id: int = 0


@dataclass
class MeshData:
    """The range of submeshes making up one mesh."""

    first_sub_mesh: int = 0
    sub_mesh_count: int = 0
    mesh_id: int = 0
    flags: int = 0


@dataclass
class SubMeshData:
    """Where a submesh lives in the shared index and vertex buffers."""

    index_count: int = 0
    first_index: int = 0
    vertex_offset: int = 0
    material_id: int = 0


@dataclass
class DrawCommand:
    """One indexed, instanced draw call."""

    index_count: int = 0
    instance_count: int = 0
    first_index: int = 0
    vertex_offset: int = 0
    first_instance: int = 0


@dataclass
class EmbeddedTexture:
    """Texture data stored inside a model file.

    Compressed data (PNG, JPEG, ...) keeps width and height at 0; raw BGRA
    data records its dimensions.
    """

    data: bytes = b""
    format_hint: str = "NONE"
    hash: str = "INVALID"
    width: int = 0
    height: int = 0
    is_compressed: bool = True

    def __bool__(self) -> bool:
        return bool(self.data)


@dataclass
class Material:
    """Surface description of a submesh."""

    name: str = "DefaultMaterial"
    diffuse_color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    specular_color: tuple[float, float, float] = (0.0, 0.0, 0.0)
    ambient_color: tuple[float, float, float] = (0.0, 0.0, 0.0)
    emissive_color: tuple[float, float, float] = (0.0, 0.0, 0.0)
    transparency: float = 0.0
    shininess: float = 0.0
    refraction_index: float = 1.0
    illumination_model: int = 1
    diffuse_texture: str = "__DefaultWhite"
    emb_diffuse: EmbeddedTexture = field(default_factory=EmbeddedTexture)
    specular_texture: str = "__DefaultGray"
    emb_specular: EmbeddedTexture = field(default_factory=EmbeddedTexture)
    normal_map: str = "__DefaultNormal"
    emb_normal: EmbeddedTexture = field(default_factory=EmbeddedTexture)
    ambient_texture: str = "__DefaultGray"
    emb_ambient: EmbeddedTexture = field(default_factory=EmbeddedTexture)


@dataclass
class LoadedModel:
    """Vertices, indices and submeshes read from one model file."""

    vertices: list[Any] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)
    sub_meshes: list[SubMeshData] = field(default_factory=list)


def hash_embedded_texture(data: bytes | None) -> str:
    """64-bit FNV-1a of ``data`` as 16 lower-case hex digits."""
    if data is None:
        return INVALID_TEXTURE_HASH
    value = _FNV_OFFSET_BASIS
    for byte in bytes(data):
        value ^= byte
        value = (value * _FNV_PRIME) & _MASK64
    return f"{value:016x}"


def extract_embedded_texture(
    data: bytes, width: int, height: int, format_hint: str = "NONE"
) -> EmbeddedTexture:
    """Copy an embedded texture out of a model.

    A ``height`` of 0 means compressed data whose byte length is ``width``;
    otherwise the data is ``width * height`` BGRA texels.
    """
    if width < 0 or height < 0:
        raise ValueError("texture dimensions must not be negative")
    raw = bytes(data)
    compressed = height == 0
    size = width if compressed else width * height * _TEXEL_SIZE
    if len(raw) < size:
        raise ValueError(f"texture needs {size} bytes, got {len(raw)}")
    payload = raw[:size]
    return EmbeddedTexture(
        data=payload,
        format_hint=format_hint,
        hash=hash_embedded_texture(payload),
        width=0 if compressed else width,
        height=0 if compressed else height,
        is_compressed=compressed,
    )