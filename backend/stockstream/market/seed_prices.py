"""Default symbol catalog and per-symbol simulator parameters."""

# Initial prices for the built-in catalog, used when no catalog file is configured
SEED_PRICES: dict[str, float] = {
    "AAPL": 189.25,
    "AMD": 162.40,
    "AMZN": 178.10,
    "BVD": 100.00,
    "GOOGL": 141.80,
    "INTC": 43.15,
    "JPM": 183.60,
    "META": 474.30,
    "MSFT": 411.20,
    "NFLX": 612.75,
    "NVDA": 880.00,
    "ORCL": 121.45,
    "TSLA": 171.05,
    "V": 276.90,
    "XOM": 112.35,
}

# Per-symbol GBM parameters
# sigma: annualized volatility, mu: annualized drift
SYMBOL_PARAMS: dict[str, dict[str, float]] = {
    "AAPL": {"sigma": 0.22, "mu": 0.05},
    "AMD": {"sigma": 0.45, "mu": 0.07},
    "AMZN": {"sigma": 0.28, "mu": 0.05},
    "GOOGL": {"sigma": 0.25, "mu": 0.05},
    "INTC": {"sigma": 0.32, "mu": 0.01},
    "JPM": {"sigma": 0.18, "mu": 0.04},
    "META": {"sigma": 0.30, "mu": 0.05},
    "MSFT": {"sigma": 0.20, "mu": 0.05},
    "NFLX": {"sigma": 0.35, "mu": 0.05},
    "NVDA": {"sigma": 0.40, "mu": 0.08},
    "TSLA": {"sigma": 0.50, "mu": 0.03},
    "V": {"sigma": 0.17, "mu": 0.04},
    "XOM": {"sigma": 0.21, "mu": 0.03},
}

# Symbols missing from SYMBOL_PARAMS (including catalog-file additions)
DEFAULT_PARAMS: dict[str, float] = {"sigma": 0.25, "mu": 0.05}
