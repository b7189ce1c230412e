"""Default Solana collaborator bundles.

Each module is a capability bundle accepted by SwapContext.initialize():
- wallet: Connection, PublicKey, LAMPORTS_PER_SOL
- agent: TradingAgent
- codec: encode
"""

from autoswap.collaborators import agent, codec, wallet

__all__ = ["agent", "codec", "wallet"]
