import mimetypes

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

FILE_KEY_BYTES = 32  # AES-256
IV_BYTES = 12  # 96-bit GCM nonce
SALT_BYTES = 16
PBKDF2_ITERATIONS = 100_000

SALT_HEX_LEN = SALT_BYTES * 2
IV_HEX_LEN = IV_BYTES * 2

DEFAULT_MIME = "application/octet-stream"


class GateKind(str, Enum):
    PASSWORD = "password"
    SELF_HASH = "self_hash"


class UploadStatus(str, Enum):
    IDLE = "idle"
    ENCRYPTING = "encrypting"
    UPLOADING = "uploading"
    SUCCESS = "success"
    ERROR = "error"


class Record(BaseModel):
    """Base for documents read from and written to the document store."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude={"id"}, exclude_none=True)


class Version(Record):
    version_number: int
    file_name: str
    file_url: str
    hash: str
    iv: str
    created_at: str
    file_size: Optional[int] = None
    file_type: Optional[str] = None


class Artifact(Record):
    id: str
    user_id: str
    title: str
    description: str = ""
    file_name: str
    file_size: int
    file_type: Optional[str] = None
    file_url: str
    hash: str
    iv: str
    license: Optional[str] = None
    access_hash: Optional[str] = None
    gate_kind: Optional[GateKind] = None
    is_public: bool = False
    price: Optional[float] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    versions: List[Version] = []
    collaborators: List[Dict[str, Any]] = []

    @model_validator(mode="after")
    def check_gate(self) -> "Artifact":
        if self.gate_kind is not None and not self.access_hash:
            raise ValueError("gateKind is set but accessHash is missing")
        return self

    def head_as_version(self, version_number: int, created_at: str) -> Version:
        return Version(
            version_number=version_number,
            file_name=self.file_name,
            file_url=self.file_url,
            hash=self.hash,
            iv=self.iv,
            created_at=created_at,
            file_size=self.file_size,
            file_type=self.file_type,
        )

    def find_version(self, version_number: int) -> Optional[Version]:
        return next((v for v in self.versions if v.version_number == version_number), None)


class VaultItem(Record):
    id: str
    user_id: str
    file_id: str
    file_name: str
    file_hash: str
    encrypted_password: str
    created_at: Optional[str] = None


@dataclass(frozen=True)
class Identity:
    uid: str
    email: str | None = None
    name: str | None = None


@dataclass
class SourceFile:
    name: str
    data: bytes
    mime_type: str = DEFAULT_MIME

    @property
    def size(self) -> int:
        return len(self.data)

    @staticmethod
    def from_path(path: Path) -> "SourceFile":
        path = Path(path)
        mime, _ = mimetypes.guess_type(path.name)
        return SourceFile(name=path.name, data=path.read_bytes(), mime_type=mime or DEFAULT_MIME)


@dataclass
class EncryptedFileResult:
    ciphertext: bytes
    key: str
    iv: str
    fingerprint: str
    file_name: str
    original_size: int
    timestamp: str


@dataclass
class UploadMetadata:
    title: str
    description: str = ""
    license: str | None = None


@dataclass
class UploadQueueItem:
    id: str
    file: SourceFile
    status: UploadStatus = UploadStatus.IDLE
    progress: float = 0
    speed: float = 0
    eta: int = 0
    result_key: str | None = None
    result_hash: str | None = None
    error_msg: str | None = None
    artifact_ids: List[str] = field(default_factory=list)
