from __future__ import annotations

import hashlib
import json
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .drop import EditionDrop
from .fees import StaticFeePolicy
from .log import configure_logging
from .models import ZERO_ADDRESS
from .payments import InMemoryPaymentRail
from .registry import InMemoryTokenRegistry
from .renderer import EditionMetadataRenderer
from .sale import SaleConfiguration


def _int_env(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)) or default)


@dataclass
class DropSettings:
    name: str
    symbol: str
    owner: str
    funds_recipient: str
    edition_size: int = 0
    royalty_bps: int = 0
    fee_recipient: str = ZERO_ADDRESS
    fee_bps: int = 500
    description: str = ""
    image_uri: str = ""
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "DropSettings":
        """Read ``EDITION_DROP_*`` variables, loading ``env_file`` (or ./.env) first."""
        load_dotenv(env_file)
        owner = os.getenv("EDITION_DROP_OWNER", ZERO_ADDRESS)
        return cls(
            name=os.getenv("EDITION_DROP_NAME", "Edition"),
            symbol=os.getenv("EDITION_DROP_SYMBOL", "EDITION"),
            owner=owner,
            funds_recipient=os.getenv("EDITION_DROP_FUNDS_RECIPIENT", owner),
            edition_size=_int_env("EDITION_DROP_EDITION_SIZE", 0),
            royalty_bps=_int_env("EDITION_DROP_ROYALTY_BPS", 0),
            fee_recipient=os.getenv("EDITION_DROP_FEE_RECIPIENT", ZERO_ADDRESS),
            fee_bps=_int_env("EDITION_DROP_FEE_BPS", 500),
            description=os.getenv("EDITION_DROP_DESCRIPTION", ""),
            image_uri=os.getenv("EDITION_DROP_IMAGE_URI", ""),
            log_level=os.getenv("EDITION_DROP_LOG_LEVEL", "INFO"),
        )

    def drop_address(self) -> str:
        # deterministic identity so fee policies can key on it
        digest = hashlib.sha256(f"{self.owner}-{self.name}-{self.symbol}".encode()).hexdigest()
        return "0x" + digest[:40]


def build_drop(settings: DropSettings, sale_config: Optional[SaleConfiguration] = None) -> EditionDrop:
    """Wire an initialised drop with in-memory collaborators."""
    configure_logging(settings.log_level)
    drop = EditionDrop(
        address=settings.drop_address(),
        registry=InMemoryTokenRegistry(),
        fee_policy=StaticFeePolicy(settings.fee_recipient, settings.fee_bps),
        payments=InMemoryPaymentRail(),
    )
    renderer = EditionMetadataRenderer(lambda: (drop.name, drop.edition_size))
    renderer_init = json.dumps({"description": settings.description, "image_uri": settings.image_uri}).encode()
    drop.initialize(
        name=settings.name,
        symbol=settings.symbol,
        owner=settings.owner,
        funds_recipient=settings.funds_recipient,
        edition_size=settings.edition_size,
        royalty_bps=settings.royalty_bps,
        renderer=renderer,
        renderer_init=renderer_init,
        sale_config=sale_config,
    )
    return drop
