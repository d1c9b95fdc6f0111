# This project was developed with assistance from AI tools.
"""Option lists for the intake wizard."""

from ..schemas.status import CatalogResponse

ECONOMIC_SECTORS = [
    "Agriculture",
    "Construction",
    "Domestic Service",
    "Domestic Trade",
    "Export",
    "Import",
    "Manufacturing",
    "Mining",
    "Real Estate",
    "Transport",
    "Personal Loan/finance",
    "Staff Mortgage loan/finance",
    "Staff personal loan/finance",
]

LOAN_TYPES = [
    "Term loan",
    "Overdraft facility request or renewal",
    "Letter of guarantee or renewal",
    "Letter of credit facility limit or renewal",
    "Murabaha",
    "Qarid",
    "Kafalah",
    "Renegotiation of loan/Financing",
    "Collateral substitution and/or release",
    "Others",
]

CUSTOMER_SEGMENTATIONS = [
    "Conventional - Corporate (0)",
    "IFB - Corporate (1)",
    "Conventional - MSME (2)",
    "IFB - MSME (3)",
    "Conventional - Retail (4)",
    "IFB - Retail (5)",
]

CREDIT_INITIATION_CENTERS = [
    "CB - Domestic Trade and Service Sector",
    "CB - Manufacturing and Agriculture Sector",
    "CB - Import and Export Sector",
    "CB - Institutional Banking Sector",
    "CB - Corporate Centers with their own branch code",
    "IFB - Corporate Banking",
    "IFB - MSME",
    "IFB - Retail",
    "Branches with their own branch code",
]


def get_catalog() -> CatalogResponse:
    return CatalogResponse(
        economic_sectors=ECONOMIC_SECTORS,
        loan_types=LOAN_TYPES,
        customer_segmentations=CUSTOMER_SEGMENTATIONS,
        credit_initiation_centers=CREDIT_INITIATION_CENTERS,
    )
