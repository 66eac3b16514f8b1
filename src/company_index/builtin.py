"""
Built-in curated company list.

Last rung of the runtime fallback ladder. It has no I/O dependency, so a
process that ships without index artifacts can still resolve well-known
registrants.
"""

from __future__ import annotations

from dataclasses import dataclass

from company_index.models import IdentityRecord, SearchAlias
from company_index.normalize import pad_cik


@dataclass(frozen=True)
class BuiltinCompany:
    ticker: str
    cik: str
    name: str
    aliases: tuple[str, ...] = ()


BUILTIN_COMPANIES: tuple[BuiltinCompany, ...] = (
    # Technology
    BuiltinCompany("AAPL", "320193", "Apple Inc.", ("APPLE",)),
    BuiltinCompany("MSFT", "789019", "Microsoft Corporation", ("MICROSOFT",)),
    BuiltinCompany("GOOGL", "1652044", "Alphabet Inc.", ("GOOG", "ALPHABET", "GOOGLE")),
    BuiltinCompany("AMZN", "1018724", "Amazon.com, Inc.", ("AMAZON",)),
    BuiltinCompany("META", "1326801", "Meta Platforms, Inc.", ("FB", "FACEBOOK")),
    BuiltinCompany("TSLA", "1318605", "Tesla, Inc.", ("TESLA",)),
    BuiltinCompany("NVDA", "1045810", "NVIDIA Corporation", ("NVIDIA",)),
    BuiltinCompany("NFLX", "1065280", "Netflix, Inc.", ("NETFLIX",)),
    BuiltinCompany("ADBE", "796343", "Adobe Inc.", ("ADOBE",)),
    BuiltinCompany("CRM", "1108524", "Salesforce, Inc.", ("SALESFORCE",)),
    BuiltinCompany("ORCL", "1341439", "Oracle Corporation", ("ORACLE",)),
    BuiltinCompany("IBM", "51143", "International Business Machines Corporation"),
    BuiltinCompany("INTC", "50863", "Intel Corporation", ("INTEL",)),
    BuiltinCompany("AMD", "2488", "Advanced Micro Devices, Inc."),
    BuiltinCompany("QCOM", "804328", "QUALCOMM Incorporated", ("QUALCOMM",)),
    BuiltinCompany("AVGO", "1730168", "Broadcom Inc.", ("BROADCOM",)),
    BuiltinCompany("TSM", "1046179", "Taiwan Semiconductor Manufacturing Company Limited", ("TSMC",)),
    BuiltinCompany("ASML", "937966", "ASML Holding N.V."),
    # Payments and platforms
    BuiltinCompany("SHOP", "1594805", "Shopify Inc.", ("SHOPIFY",)),
    BuiltinCompany("PYPL", "1633917", "PayPal Holdings, Inc.", ("PAYPAL",)),
    BuiltinCompany("SQ", "1512673", "Block, Inc.", ("BLOCK", "SQUARE")),
    BuiltinCompany("UBER", "1543151", "Uber Technologies, Inc."),
    BuiltinCompany("LYFT", "1759509", "Lyft, Inc."),
    # US-listed Chinese issuers
    BuiltinCompany("BABA", "1577552", "Alibaba Group Holding Limited", ("ALIBABA",)),
    BuiltinCompany("JD", "1549802", "JD.com, Inc."),
    BuiltinCompany("BIDU", "1329099", "Baidu, Inc.", ("BAIDU",)),
    BuiltinCompany("PDD", "1737806", "PDD Holdings Inc.", ("PINDUODUO",)),
    BuiltinCompany("BILI", "1792792", "Bilibili Inc.", ("BILIBILI",)),
    BuiltinCompany("NIO", "1736541", "NIO Inc."),
    BuiltinCompany("LI", "1791708", "Li Auto Inc."),
    BuiltinCompany("XPEV", "1806707", "XPeng Inc.", ("XPENG",)),
    # Financials
    BuiltinCompany("JPM", "19617", "JPMorgan Chase & Co.", ("JPMORGAN",)),
    BuiltinCompany("BAC", "70858", "Bank of America Corporation", ("BANKOFAMERICA",)),
    BuiltinCompany("WFC", "72971", "Wells Fargo & Company", ("WELLSFARGO",)),
    BuiltinCompany("C", "831001", "Citigroup Inc.", ("CITIGROUP",)),
    BuiltinCompany("GS", "886982", "Goldman Sachs Group, Inc.", ("GOLDMAN",)),
    BuiltinCompany("MS", "895421", "Morgan Stanley", ("MORGAN",)),
    BuiltinCompany("V", "1403161", "Visa Inc.", ("VISA",)),
    BuiltinCompany("MA", "1141391", "Mastercard Incorporated", ("MASTERCARD",)),
    BuiltinCompany("AXP", "4962", "American Express Company", ("AMERICANEXPRESS",)),
    # Retail and consumer
    BuiltinCompany("WMT", "104169", "Walmart Inc.", ("WALMART",)),
    BuiltinCompany("COST", "909832", "Costco Wholesale Corporation", ("COSTCO",)),
    BuiltinCompany("TGT", "27419", "Target Corporation", ("TARGET",)),
    BuiltinCompany("HD", "354950", "Home Depot, Inc.", ("HOMEDEPOT",)),
    BuiltinCompany("LOW", "60667", "Lowe's Companies, Inc.", ("LOWES",)),
    BuiltinCompany("NKE", "320187", "NIKE, Inc.", ("NIKE",)),
    BuiltinCompany("SBUX", "829224", "Starbucks Corporation", ("STARBUCKS",)),
    BuiltinCompany("MCD", "63908", "McDonald's Corporation", ("MCDONALDS",)),
    BuiltinCompany("KO", "21344", "Coca-Cola Company (The)", ("COCACOLA",)),
    BuiltinCompany("PEP", "77476", "PepsiCo, Inc.", ("PEPSI", "PEPSICO")),
    # Media and telecom
    BuiltinCompany("DIS", "1744489", "Walt Disney Company (The)", ("DISNEY",)),
    BuiltinCompany("CMCSA", "1166691", "Comcast Corporation", ("COMCAST",)),
    BuiltinCompany("T", "732717", "AT&T Inc.", ("ATT",)),
    BuiltinCompany("VZ", "732712", "Verizon Communications Inc.", ("VERIZON",)),
    # Industrials, energy, autos
    BuiltinCompany("F", "37996", "Ford Motor Company", ("FORD",)),
    BuiltinCompany("GM", "1467858", "General Motors Company", ("GENERALMOTORS",)),
    BuiltinCompany("XOM", "34088", "Exxon Mobil Corporation", ("EXXON",)),
    BuiltinCompany("CVX", "93410", "Chevron Corporation", ("CHEVRON",)),
    BuiltinCompany("BA", "12927", "Boeing Company (The)", ("BOEING",)),
    BuiltinCompany("LMT", "936468", "Lockheed Martin Corporation", ("LOCKHEED",)),
    BuiltinCompany("CAT", "18230", "Caterpillar Inc.", ("CATERPILLAR",)),
    BuiltinCompany("DE", "315189", "Deere & Company", ("DEERE",)),
    BuiltinCompany("AMT", "1053507", "American Tower Corporation", ("AMERICANTOWER",)),
    # Healthcare
    BuiltinCompany("JNJ", "200406", "Johnson & Johnson", ("JOHNSON",)),
    BuiltinCompany("PFE", "78003", "Pfizer Inc.", ("PFIZER",)),
    BuiltinCompany("ABBV", "1551152", "AbbVie Inc.", ("ABBVIE",)),
    BuiltinCompany("UNH", "731766", "UnitedHealth Group Incorporated", ("UNITEDHEALTH",)),
)


def builtin_index() -> tuple[dict[str, SearchAlias], dict[str, IdentityRecord]]:
    """Synthesize a search map and identity map from the curated list."""
    search: dict[str, SearchAlias] = {}
    identities: dict[str, IdentityRecord] = {}

    for company in BUILTIN_COMPANIES:
        cik = pad_cik(company.cik)
        identities[cik] = IdentityRecord(
            cik=cik,
            name=company.name,
            ticker=company.ticker,
            priority=True,
        )
        for key in (company.ticker, *company.aliases):
            search.setdefault(key, SearchAlias(key=key, cik=cik, name=company.name))

    return search, identities
