"""DID construction and the update, upgrade and deactivation entries."""

from ssi.did.builder import DID, DIDBuilder
from ssi.did.deactivator import DIDDeactivator
from ssi.did.updater import DIDUpdater
from ssi.did.upgrader import DIDVersionUpgrader
