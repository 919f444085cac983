"""
Static symbol catalogs used across the markets context.

Maps between provider identifiers and the search terms used for news.
"""

INDEX_SYMBOLS = ("SPY", "QQQ", "DIA", "IWM")

ECONOMIC_SERIES = {
    "UNRATE": "Unemployment Rate",
    "CPIAUCSL": "Consumer Price Index",
    "GDP": "Gross Domestic Product",
    "FEDFUNDS": "Federal Funds Rate",
}

# CoinGecko coin id -> FMP crypto pair
COINGECKO_TO_FMP = {
    "bitcoin": "BTCUSD",
    "ethereum": "ETHUSD",
    "tether": "USDTUSD",
    "binancecoin": "BNBUSD",
    "solana": "SOLUSD",
    "usd-coin": "USDCUSD",
    "staked-ether": "STETH",
    "xrp": "XRPUSD",
    "dogecoin": "DOGEUSD",
    "tron": "TRXUSD",
    "cardano": "ADAUSD",
    "avalanche-2": "AVAXUSD",
    "chainlink": "LINKUSD",
    "bitcoin-cash": "BCHUSD",
    "polkadot": "DOTUSD",
    "polygon": "MATICUSD",
    "litecoin": "LTCUSD",
    "internet-computer": "ICPUSD",
    "ethereum-classic": "ETCUSD",
    "stellar": "XLMUSD",
    "crypto-com-chain": "CROUSD",
    "uniswap": "UNIUSD",
    "monero": "XMRUSD",
    "okb": "OKBUSD",
    "cosmos": "ATOMUSD",
    "filecoin": "FILUSD",
    "hedera-hashgraph": "HBARUSD",
    "vechain": "VETUSD",
    "theta-token": "THETAUSD",
    "algorand": "ALGOUSD",
}

STOCK_NEWS_TERMS = {
    "SPY": "S&P 500 OR SPY ETF",
    "QQQ": "NASDAQ OR QQQ ETF OR technology stocks",
    "DIA": "Dow Jones OR DIA ETF",
    "IWM": "Russell 2000 OR IWM ETF OR small cap",
}

CRYPTO_NEWS_TERMS = {
    "BTC": "Bitcoin OR BTC cryptocurrency",
    "ETH": "Ethereum OR ETH cryptocurrency",
    "USDT": "Tether OR USDT stablecoin",
    "BNB": "Binance Coin OR BNB cryptocurrency",
    "XRP": "Ripple OR XRP cryptocurrency",
    "ADA": "Cardano OR ADA cryptocurrency",
    "DOGE": "Dogecoin OR DOGE cryptocurrency",
    "SOL": "Solana OR SOL cryptocurrency",
    "DOT": "Polkadot OR DOT cryptocurrency",
    "MATIC": "Polygon OR MATIC cryptocurrency",
    "AVAX": "Avalanche OR AVAX cryptocurrency",
    "UNI": "Uniswap OR UNI cryptocurrency",
    "LINK": "Chainlink OR LINK cryptocurrency",
    "LTC": "Litecoin OR LTC cryptocurrency",
    "ATOM": "Cosmos OR ATOM cryptocurrency",
    "BCH": "Bitcoin Cash OR BCH cryptocurrency",
    "NEAR": "NEAR Protocol OR NEAR cryptocurrency",
    "FTM": "Fantom OR FTM cryptocurrency",
    "ALGO": "Algorand OR ALGO cryptocurrency",
    "MANA": "Decentraland OR MANA cryptocurrency",
}

STOCK_NEWS_DOMAINS = (
    "reuters.com,bloomberg.com,cnbc.com,marketwatch.com,yahoo.com,wsj.com"
)
CRYPTO_NEWS_DOMAINS = (
    "coindesk.com,cointelegraph.com,decrypt.co,theblock.co,bitcoinmagazine.com,"
    "cryptonews.com,cryptoslate.com,blockonomi.com,ambcrypto.com,u.today"
)

CRYPTO_KEYWORDS = ("crypto", "bitcoin", "blockchain")


def to_fmp_crypto_symbol(coin_id: str) -> str:
    """Map a CoinGecko coin id to the FMP pair symbol (e.g. bitcoin -> BTCUSD)."""
    return COINGECKO_TO_FMP.get(coin_id, f"{coin_id.upper()}USD")


def stock_news_query(symbol: str) -> str:
    return STOCK_NEWS_TERMS.get(symbol, symbol)


def crypto_news_query(symbol: str) -> str:
    return CRYPTO_NEWS_TERMS.get(symbol.upper(), f"{symbol} cryptocurrency")
