"""
Self-sovereign identity: DIDs anchored on the Factom blockchain.

Import from the subpackages, e.g. `from ssi.did import DID` and
`from ssi.keys import ManagementKey`.
"""
