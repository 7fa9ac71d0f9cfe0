"""solswap - Solana Tracker swap client.

Fetches swap transactions from the Solana Tracker API, signs them with a
local keypair, submits them to a Solana RPC node and waits for confirmation.
"""

__version__ = "0.1.0"
