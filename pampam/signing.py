# Copyright (c) 2025 Varshith Gudur. Licensed under AGPLv3.
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional, TypedDict


class NextArgs(TypedDict):
    """Log position handed out by the node for the next entry of a public key."""
    logId: str
    seqNum: str
    skiplink: Optional[str]
    backlink: Optional[str]


@dataclass
class SignedEntry:
    entry: str       # hex encoded, signed entry
    operation: str   # hex encoded operation the entry points at
    hash: str        # entry hash, used as the operation id


class Signer(ABC):
    """
    Signing identity used when publishing operations.

    Key storage, entry encoding and the signature scheme live behind this
    interface; the operator only passes plain operations and log arguments in.
    """

    @property
    @abstractmethod
    def public_key(self) -> str:
        ...

    @abstractmethod
    def sign(self, operation: List[Any], next_args: NextArgs) -> SignedEntry:
        """Encode `operation`, then sign and encode an entry for it at `next_args`."""
        ...
