import copy
import json
import logging
from contextlib import contextmanager
from dataclasses import asdict
from typing import Any, Iterator, TextIO, Type, TypeVar

from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

from nethermind.clmm import types
from nethermind.clmm.exceptions import ClmmRevert

logger = logging.getLogger("nethermind").getChild("clmm").getChild("store")

Account = TypeVar("Account")

ACCOUNT_TYPES: dict[str, Type] = {
    cls.__name__: cls
    for cls in (
        types.AmmConfig,
        types.PoolState,
        types.TickArrayState,
        types.ProtocolPositionState,
        types.PersonalPositionState,
        types.ObservationState,
    )
}

EVENT_TYPES: dict[str, Type] = {
    cls.__name__: cls
    for cls in (
        types.ConfigChangeEvent,
        types.PoolCreatedEvent,
        types.CreatePersonalPositionEvent,
        types.IncreaseLiquidityEvent,
        types.DecreaseLiquidityEvent,
        types.LiquidityChangeEvent,
        types.SwapEvent,
        types.CollectProtocolFeeEvent,
        types.UpdateRewardInfosEvent,
    )
}


def _from_dict(cls: Type, data: dict[str, Any]):
    if hasattr(cls, "from_dict"):
        return cls.from_dict(data)
    return cls(**data)


class AccountStore:
    """
    In-process table of CLMM records keyed by derived address.  Stands in for the ledger that hosts the program:
    records are read & written by address, notification events are appended to an event log, and every mutating
    operation runs inside :meth:`atomic`, so a failed operation leaves every record unchanged.
    """

    accounts: dict[ChecksumAddress, Any]
    """Every record in the store, keyed by address"""

    events: list[Any]
    """Events emitted by committed operations, in order"""

    timestamp: int
    """Current unix timestamp, used for pool open times & reward emissions"""

    def __init__(self, timestamp: int = 0) -> None:
        self.accounts = {}
        self.events = []
        self.timestamp = timestamp

    def __contains__(self, address: str) -> bool:
        return to_checksum_address(address) in self.accounts

    def load(self, address: str, account_type: Type[Account]) -> Account:
        """
        Returns the record stored at address.  Records are returned by reference, and mutations are visible
        to every later load.

        :raises ClmmRevert: if no record exists at address, or the record is not of account_type
        """
        account = self.accounts.get(to_checksum_address(address))
        if account is None:
            raise ClmmRevert(f"{account_type.__name__} account {address} does not exist")
        if not isinstance(account, account_type):
            raise ClmmRevert(f"Account {address} is a {type(account).__name__}, not a {account_type.__name__}")
        return account

    def load_or_none(self, address: str, account_type: Type[Account]) -> Account | None:
        """Returns the record stored at address, or None if it does not exist"""
        if address not in self:
            return None
        return self.load(address, account_type)

    def init(self, address: str, account: Account) -> Account:
        """
        Stores a new record.

        :raises ClmmRevert: if the address is already in use
        """
        checksum_address = to_checksum_address(address)
        if checksum_address in self.accounts:
            raise ClmmRevert(f"Account {checksum_address} already in use")
        logger.debug(f"Initializing {type(account).__name__} at {checksum_address}")
        self.accounts[checksum_address] = account
        return account

    def close(self, address: str):
        """Deletes a record"""
        logger.debug(f"Closing account {address}")
        self.accounts.pop(to_checksum_address(address))

    def emit(self, event: Any):
        """Appends a notification event to the event log"""
        logger.debug(f"Emitting {event}")
        self.events.append(event)

    def accounts_of_type(self, account_type: Type[Account]) -> dict[ChecksumAddress, Account]:
        """Returns every record of account_type, keyed by address"""
        return {address: account for address, account in self.accounts.items() if isinstance(account, account_type)}

    @contextmanager
    def atomic(self) -> Iterator["AccountStore"]:
        """
        Runs the enclosed operation as a single atomic unit.  If the operation raises, every record and the
        event log are restored to their state before the operation, and the exception is re-raised.
        """
        accounts_snapshot = copy.deepcopy(self.accounts)
        event_count = len(self.events)
        try:
            yield self
        except Exception:
            logger.debug("Operation failed, restoring account snapshot")
            self.accounts = accounts_snapshot
            del self.events[event_count:]
            raise

    # -----------------------------------------------------------------------------------------------------------
    #  JSON Persistence
    # -----------------------------------------------------------------------------------------------------------

    def save(self, file: TextIO):
        """
        Saves every record & event to a JSON file.  The file can later be reloaded with :meth:`load_from_file`

        :param file: writable text file
        """
        logger.info("Json Encoding Account Store")
        json.dump(
            {
                "timestamp": self.timestamp,
                "accounts": {
                    address: {"type": type(account).__name__, "data": asdict(account)}
                    for address, account in self.accounts.items()
                },
                "events": [{"type": type(event).__name__, "data": asdict(event)} for event in self.events],
            },
            file,
        )
        logger.info(f"Saved {len(self.accounts)} accounts and {len(self.events)} events")

    @classmethod
    def load_from_file(cls, file: TextIO) -> "AccountStore":
        """
        Loads an AccountStore from a JSON file generated by :meth:`save`

        :param file: readable text file
        """
        store_params = json.load(file)

        store = AccountStore(timestamp=store_params["timestamp"])
        for address, account in store_params["accounts"].items():
            store.accounts[to_checksum_address(address)] = _from_dict(ACCOUNT_TYPES[account["type"]], account["data"])
        store.events = [_from_dict(EVENT_TYPES[event["type"]], event["data"]) for event in store_params["events"]]

        logger.info(f"Loaded {len(store.accounts)} accounts and {len(store.events)} events")
        return store
