import json

from edition_drop import (
    EditionDrop,
    EditionMetadataRenderer,
    InMemoryPaymentRail,
    InMemoryTokenRegistry,
    StaticFeePolicy,
)


def addr(n):
    return "0x" + format(n, "040x")


DROP = addr(0xD0)
OWNER = addr(1)
FUNDS = addr(2)
FEE_RECIPIENT = addr(3)
MINTER = addr(4)
SALES_MANAGER = addr(5)
ALICE = addr(10)
BOB = addr(11)
CAROL = addr(12)


def make_drop(edition_size=10, royalty_bps=1000, fee_bps=500, sale_config=None, registry=None):
    registry = registry or InMemoryTokenRegistry()
    payments = InMemoryPaymentRail()
    drop = EditionDrop(DROP, registry, StaticFeePolicy(FEE_RECIPIENT, fee_bps), payments)
    renderer = EditionMetadataRenderer(lambda: (drop.name, drop.edition_size))
    drop.initialize(
        name="Test Edition",
        symbol="TEST",
        owner=OWNER,
        funds_recipient=FUNDS,
        edition_size=edition_size,
        royalty_bps=royalty_bps,
        renderer=renderer,
        renderer_init=json.dumps({"description": "A test drop", "image_uri": "ipfs://image"}).encode(),
        sale_config=sale_config,
    )
    return drop, registry, payments
