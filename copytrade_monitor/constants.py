# ============================================
# DEX PROGRAM IDS
# ============================================
JUPITER_V6_PROGRAM = "JUP6LkbZbjS1jKKwapdHNy74zcZ3tLUZoi5QNyVTaV4"
JUPITER_V4_PROGRAM = "JUP4Fb2cqiRUcaTHdrPC8h2gNsA2ETXiPDD33WcGuJB"
RAYDIUM_V4_PROGRAM = "675kPX9MHTjS2zt1qfr1NYHuzeLXfQM9H24wFSUt1Mp8"
RAYDIUM_CLMM_PROGRAM = "CAMMCzo5YL8w4VFF8KVHrK22GGUsp5VTaW7grrKgrWqK"
RAYDIUM_CPMM_PROGRAM = "CPMMoo8L3F4NbTegBCKVNunggL7H1ZpdTHKxQB5qKP1C"
RAYDIUM_LAUNCHPAD_PROGRAM = "LanMV9sAd7wArD4vJFi2qDdfnVhFxYSUg6eADduJ3uj"
ORCA_WHIRLPOOL_PROGRAM = "whirLbMiicVdio4qvUfM5KAg6Ct8VwpYzGff3uctyCc"
PUMP_PROGRAM = "6EF8rrecthR5Dkzon8Nwu78hRvfCKubJ14M5uBEwF6P"
PUMP_AMM_PROGRAM = "pAMMBay6oceH9fJKBRHGP5D4bD4sWpmSwMn52FMfXEA"
METEORA_DLMM = "LBUZKhRxPF3XUpBCjp4YzTKgLccjZhTSDM9YuVaPwxo"
METEORA_DBC = "dbcij3LWUppWqq96dh6gJWwBifmcGfLSB5D4DuSMaqN"
METEORA_POOLS = "Eo7WjKq67rjJQSZxS6z3YkapzY3eMj6Xy8X5EQVn5UaB"
PHOENIX_PROGRAM = "PhoeNiXZ8ByJGLkxNfZRnkUfjvmuYqLR89jjFHGqdXY"

# Program id -> display name
DEX_PROGRAMS = {
    # Jupiter
    JUPITER_V6_PROGRAM: "Jupiter v6",
    JUPITER_V4_PROGRAM: "Jupiter v4",
    # Raydium
    RAYDIUM_V4_PROGRAM: "Raydium AMM",
    RAYDIUM_CLMM_PROGRAM: "Raydium CLMM",
    RAYDIUM_CPMM_PROGRAM: "Raydium CPMM",
    RAYDIUM_LAUNCHPAD_PROGRAM: "Raydium Launchpad",
    # Orca
    ORCA_WHIRLPOOL_PROGRAM: "Orca Whirlpool",
    # Pump.fun
    PUMP_PROGRAM: "Pump.fun",
    PUMP_AMM_PROGRAM: "Pump AMM",
    "39azUYFWPz3VHgKCf3VChUwbpURdCHRxjWVowf5jUJjg": "Pump AMM (legacy)",
    "H78HrdQ2E7N5eHrE4FEnPNxxdNofyYcrZFzkVdoyGWg9": "Pump.fun H78",
    "9Fox6i7oT8p4qHn76Qj3dks8RRMGsXQyfMSBScA5yVyX": "Pump.fun 9F",
    # Meteora
    METEORA_DLMM: "Meteora DLMM",
    METEORA_DBC: "Meteora DBC",
    "HLnpSz9h2S4hiLQ43rnSD9XkcUThA7B8hQMKmDaiTLcC": "Meteora DLMM v2",
    METEORA_POOLS: "Meteora Pools",
    # Others
    PHOENIX_PROGRAM: "Phoenix",
    "AxiomfHaWDemCFBLBayqnEnNwE6b7B2Qz3UmzMpgbMG6": "Axiom",
    "AxiomxSitiyXyPjKgJ9XSrdhsydtZsskZTEDam3PxKcC": "Axiom V2",
}

# ============================================
# MINTS & UNITS
# ============================================
# Native SOL deltas are reported under the wrapped SOL mint
NATIVE_MINT = "So11111111111111111111111111111111111111112"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"

LAMPORTS_PER_SOL = 1_000_000_000

# Balance changes at or below this are rounding noise
DUST_THRESHOLD = 1e-6

# ============================================
# MONITORING DEFAULTS
# ============================================
DEFAULT_RPC_URL = "https://api.mainnet-beta.solana.com"
POLL_INTERVAL_SECONDS = 2.0  # Stays under public RPC rate limits
SIGNATURE_PAGE_LIMIT = 10
LEDGER_MAX_SIZE = 1000
LEDGER_RETAIN = 500
RPC_TIMEOUT_SECONDS = 10.0
# A transaction that keeps failing to fetch is given up on after this many tries
MAX_FETCH_ATTEMPTS = 3
RECENT_SIGNALS_MAX = 100
