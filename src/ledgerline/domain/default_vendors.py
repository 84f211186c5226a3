"""Built-in vendor keyword table used when no user rule matches.

Each entry is (keyword, category, subcategory, vendor). Keywords are matched
as whole words against the normalized description, longest keyword first.
"""

from dataclasses import dataclass
from typing import Optional

from ledgerline.domain.entities import AmountDirection

# Categories that only apply to money coming in
INCOME_CATEGORIES = frozenset({"GROSS_RECEIPTS", "OTHER_INCOME"})

# Keywords whose direction differs from their category's
DIRECTION_OVERRIDES = {
    "TRANSFER FROM": AmountDirection.POSITIVE,
    "ZELLE": AmountDirection.ANY,
}

DEFAULT_VENDOR_TABLE = [
    # Gas stations
    ("SHELL", "CAR_TRUCK_EXPENSES", "Fuel/Gas", "Shell"),
    ("CHEVRON", "CAR_TRUCK_EXPENSES", "Fuel/Gas", "Chevron"),
    ("EXXON", "CAR_TRUCK_EXPENSES", "Fuel/Gas", "Exxon"),
    ("EXXONMOBIL", "CAR_TRUCK_EXPENSES", "Fuel/Gas", "ExxonMobil"),
    ("MOBIL", "CAR_TRUCK_EXPENSES", "Fuel/Gas", "Mobil"),
    ("BP", "CAR_TRUCK_EXPENSES", "Fuel/Gas", "BP"),
    ("SPEEDWAY", "CAR_TRUCK_EXPENSES", "Fuel/Gas", "Speedway"),
    ("MARATHON", "CAR_TRUCK_EXPENSES", "Fuel/Gas", "Marathon"),
    ("CIRCLE K", "CAR_TRUCK_EXPENSES", "Fuel/Gas", "Circle K"),
    ("RACETRAC", "CAR_TRUCK_EXPENSES", "Fuel/Gas", "RaceTrac"),
    ("WAWA", "CAR_TRUCK_EXPENSES", "Fuel/Gas", "Wawa"),
    ("SHEETZ", "CAR_TRUCK_EXPENSES", "Fuel/Gas", "Sheetz"),
    ("PILOT", "CAR_TRUCK_EXPENSES", "Fuel/Gas", "Pilot"),
    ("LOVES", "CAR_TRUCK_EXPENSES", "Fuel/Gas", "Love's"),
    ("LOVE'S", "CAR_TRUCK_EXPENSES", "Fuel/Gas", "Love's"),
    ("SUNOCO", "CAR_TRUCK_EXPENSES", "Fuel/Gas", "Sunoco"),
    ("VALERO", "CAR_TRUCK_EXPENSES", "Fuel/Gas", "Valero"),
    ("CITGO", "CAR_TRUCK_EXPENSES", "Fuel/Gas", "Citgo"),
    ("TEXACO", "CAR_TRUCK_EXPENSES", "Fuel/Gas", "Texaco"),
    ("CUMBERLAND", "CAR_TRUCK_EXPENSES", "Fuel/Gas", "Cumberland Farms"),
    ("QT", "CAR_TRUCK_EXPENSES", "Fuel/Gas", "QuikTrip"),
    ("QUIKTRIP", "CAR_TRUCK_EXPENSES", "Fuel/Gas", "QuikTrip"),
    ("KWIK TRIP", "CAR_TRUCK_EXPENSES", "Fuel/Gas", "Kwik Trip"),
    ("7-ELEVEN", "CAR_TRUCK_EXPENSES", "Fuel/Gas", "7-Eleven"),
    ("7 ELEVEN", "CAR_TRUCK_EXPENSES", "Fuel/Gas", "7-Eleven"),

    # Auto parts & service
    ("AUTOZONE", "CAR_TRUCK_EXPENSES", "Tires and Parts", "AutoZone"),
    ("ADVANCE AUTO", "CAR_TRUCK_EXPENSES", "Tires and Parts", "Advance Auto Parts"),
    ("OREILLY", "CAR_TRUCK_EXPENSES", "Tires and Parts", "O'Reilly Auto Parts"),
    ("O'REILLY", "CAR_TRUCK_EXPENSES", "Tires and Parts", "O'Reilly Auto Parts"),
    ("NAPA", "CAR_TRUCK_EXPENSES", "Tires and Parts", "NAPA"),
    ("DISCOUNT TIRE", "CAR_TRUCK_EXPENSES", "Tires and Parts", "Discount Tire"),
    ("FIRESTONE", "CAR_TRUCK_EXPENSES", "Repairs & Maintenance", "Firestone"),
    ("GOODYEAR", "CAR_TRUCK_EXPENSES", "Tires and Parts", "Goodyear"),
    ("JIFFY LUBE", "CAR_TRUCK_EXPENSES", "Repairs & Maintenance", "Jiffy Lube"),
    ("VALVOLINE", "CAR_TRUCK_EXPENSES", "Repairs & Maintenance", "Valvoline"),
    ("MIDAS", "CAR_TRUCK_EXPENSES", "Repairs & Maintenance", "Midas"),
    ("PENSKE", "RENT_LEASE_VEHICLES", None, "Penske"),
    ("UHAUL", "RENT_LEASE_VEHICLES", None, "U-Haul"),
    ("U-HAUL", "RENT_LEASE_VEHICLES", None, "U-Haul"),
    ("ENTERPRISE", "RENT_LEASE_VEHICLES", None, "Enterprise"),
    ("HERTZ", "RENT_LEASE_VEHICLES", None, "Hertz"),
    ("BUDGET RENT", "RENT_LEASE_VEHICLES", None, "Budget"),

    # Building materials
    ("HOME DEPOT", "MATERIALS_SUPPLIES", "Manufacturing Materials", "Home Depot"),
    ("HOMEDEPOT", "MATERIALS_SUPPLIES", "Manufacturing Materials", "Home Depot"),
    ("LOWES", "MATERIALS_SUPPLIES", "Manufacturing Materials", "Lowe's"),
    ("LOWE'S", "MATERIALS_SUPPLIES", "Manufacturing Materials", "Lowe's"),
    ("MENARDS", "MATERIALS_SUPPLIES", "Manufacturing Materials", "Menards"),
    ("84 LUMBER", "MATERIALS_SUPPLIES", "Manufacturing Materials", "84 Lumber"),
    ("ACE HARDWARE", "MATERIALS_SUPPLIES", "Manufacturing Materials", "Ace Hardware"),
    ("TRUE VALUE", "MATERIALS_SUPPLIES", "Manufacturing Materials", "True Value"),
    ("HARBOR FREIGHT", "TOOLS_EQUIPMENT", None, "Harbor Freight"),
    ("NORTHERN TOOL", "TOOLS_EQUIPMENT", None, "Northern Tool"),
    ("FASTENAL", "MATERIALS_SUPPLIES", "Manufacturing Materials", "Fastenal"),
    ("GRAINGER", "MATERIALS_SUPPLIES", "Manufacturing Materials", "Grainger"),
    ("FERGUSON", "MATERIALS_SUPPLIES", "Manufacturing Materials", "Ferguson"),
    ("FLOOR & DECOR", "MATERIALS_SUPPLIES", "Manufacturing Materials", "Floor & Decor"),
    ("SHERWIN", "MATERIALS_SUPPLIES", "Manufacturing Materials", "Sherwin-Williams"),
    ("BENJAMIN MOORE", "MATERIALS_SUPPLIES", "Manufacturing Materials", "Benjamin Moore"),

    # Office supplies
    ("STAPLES", "OFFICE_EXPENSES", "Small Equipment (< $2,500)", "Staples"),
    ("OFFICE DEPOT", "OFFICE_EXPENSES", "Small Equipment (< $2,500)", "Office Depot"),
    ("OFFICEMAX", "OFFICE_EXPENSES", "Small Equipment (< $2,500)", "OfficeMax"),
    ("OFFICE MAX", "OFFICE_EXPENSES", "Small Equipment (< $2,500)", "OfficeMax"),
    ("FED EX OFFICE", "OFFICE_EXPENSES", "Printer Paper & Ink", "FedEx Office"),
    ("FEDEX OFFICE", "OFFICE_EXPENSES", "Printer Paper & Ink", "FedEx Office"),

    # Software & tech
    ("ADOBE", "SOFTWARE_SUBSCRIPTIONS", None, "Adobe"),
    ("MICROSOFT", "SOFTWARE_SUBSCRIPTIONS", None, "Microsoft"),
    ("MSFT", "SOFTWARE_SUBSCRIPTIONS", None, "Microsoft"),
    ("GOOGLE", "SOFTWARE_SUBSCRIPTIONS", None, "Google"),
    ("DROPBOX", "SOFTWARE_SUBSCRIPTIONS", None, "Dropbox"),
    ("ZOOM", "SOFTWARE_SUBSCRIPTIONS", None, "Zoom"),
    ("SLACK", "SOFTWARE_SUBSCRIPTIONS", None, "Slack"),
    ("GITHUB", "SOFTWARE_SUBSCRIPTIONS", None, "GitHub"),
    ("ATLASSIAN", "SOFTWARE_SUBSCRIPTIONS", None, "Atlassian"),
    ("JIRA", "SOFTWARE_SUBSCRIPTIONS", None, "Atlassian"),
    ("SALESFORCE", "SOFTWARE_SUBSCRIPTIONS", None, "Salesforce"),
    ("HUBSPOT", "SOFTWARE_SUBSCRIPTIONS", None, "HubSpot"),
    ("QUICKBOOKS", "SOFTWARE_SUBSCRIPTIONS", None, "QuickBooks"),
    ("INTUIT", "SOFTWARE_SUBSCRIPTIONS", None, "Intuit"),
    ("CANVA", "SOFTWARE_SUBSCRIPTIONS", None, "Canva"),
    ("MAILCHIMP", "SOFTWARE_SUBSCRIPTIONS", None, "Mailchimp"),
    ("CONSTANT CONTACT", "SOFTWARE_SUBSCRIPTIONS", None, "Constant Contact"),
    ("DOCUSIGN", "SOFTWARE_SUBSCRIPTIONS", None, "DocuSign"),
    ("NOTION", "SOFTWARE_SUBSCRIPTIONS", None, "Notion"),
    ("ASANA", "SOFTWARE_SUBSCRIPTIONS", None, "Asana"),
    ("MONDAY.COM", "SOFTWARE_SUBSCRIPTIONS", None, "Monday.com"),
    ("CALENDLY", "SOFTWARE_SUBSCRIPTIONS", None, "Calendly"),
    ("GRAMMARLY", "SOFTWARE_SUBSCRIPTIONS", None, "Grammarly"),
    ("CHATGPT", "SOFTWARE_SUBSCRIPTIONS", None, "OpenAI"),
    ("OPENAI", "SOFTWARE_SUBSCRIPTIONS", None, "OpenAI"),
    ("APPLE.COM", "SOFTWARE_SUBSCRIPTIONS", None, "Apple"),
    ("SPOTIFY", "SOFTWARE_SUBSCRIPTIONS", None, "Spotify"),

    # Web hosting
    ("GODADDY", "WEB_HOSTING", None, "GoDaddy"),
    ("NAMECHEAP", "WEB_HOSTING", None, "Namecheap"),
    ("BLUEHOST", "WEB_HOSTING", None, "Bluehost"),
    ("HOSTGATOR", "WEB_HOSTING", None, "HostGator"),
    ("SITEGROUND", "WEB_HOSTING", None, "SiteGround"),
    ("CLOUDFLARE", "WEB_HOSTING", None, "Cloudflare"),
    ("AWS", "WEB_HOSTING", None, "Amazon Web Services"),
    ("AMAZON WEB", "WEB_HOSTING", None, "Amazon Web Services"),
    ("DIGITALOCEAN", "WEB_HOSTING", None, "DigitalOcean"),
    ("HEROKU", "WEB_HOSTING", None, "Heroku"),
    ("VERCEL", "WEB_HOSTING", None, "Vercel"),
    ("NETLIFY", "WEB_HOSTING", None, "Netlify"),
    ("FIREBASE", "WEB_HOSTING", None, "Firebase"),
    ("RENDER", "WEB_HOSTING", None, "Render"),
    ("SQUARESPACE", "WEB_HOSTING", None, "Squarespace"),
    ("WIX", "WEB_HOSTING", None, "Wix"),
    ("WORDPRESS", "WEB_HOSTING", None, "WordPress"),
    ("SHOPIFY", "WEB_HOSTING", None, "Shopify"),

    # Utilities
    ("FPL", "UTILITIES", None, "Florida Power & Light"),
    ("DUKE ENERGY", "UTILITIES", None, "Duke Energy"),
    ("GEORGIA POWER", "UTILITIES", None, "Georgia Power"),
    ("CONEDISON", "UTILITIES", None, "Con Edison"),
    ("CON EDISON", "UTILITIES", None, "Con Edison"),
    ("PG&E", "UTILITIES", None, "PG&E"),
    ("PACIFIC GAS", "UTILITIES", None, "PG&E"),
    ("SOUTHERN CALIFORNIA EDISON", "UTILITIES", None, "SCE"),
    ("AT&T", "UTILITIES", None, "AT&T"),
    ("ATT", "UTILITIES", None, "AT&T"),
    ("VERIZON", "UTILITIES", None, "Verizon"),
    ("VZWRLSS", "UTILITIES", None, "Verizon"),
    ("T-MOBILE", "UTILITIES", None, "T-Mobile"),
    ("TMOBILE", "UTILITIES", None, "T-Mobile"),
    ("COMCAST", "UTILITIES", None, "Comcast"),
    ("XFINITY", "UTILITIES", None, "Xfinity"),
    ("SPECTRUM", "UTILITIES", None, "Spectrum"),
    ("COX COMM", "UTILITIES", None, "Cox"),
    ("CENTURYLINK", "UTILITIES", None, "CenturyLink"),
    ("WATER DEPT", "UTILITIES", None, "Water Department"),
    ("CITY OF", "UTILITIES", None, "City Utilities"),

    # Insurance
    ("GEICO", "INSURANCE_OTHER", "Commercial Auto (if not Line 9)", "GEICO"),
    ("STATE FARM", "INSURANCE_OTHER", None, "State Farm"),
    ("PROGRESSIVE", "INSURANCE_OTHER", None, "Progressive"),
    ("ALLSTATE", "INSURANCE_OTHER", None, "Allstate"),
    ("LIBERTY MUTUAL", "INSURANCE_OTHER", None, "Liberty Mutual"),
    ("NATIONWIDE", "INSURANCE_OTHER", None, "Nationwide"),
    ("FARMERS", "INSURANCE_OTHER", None, "Farmers"),
    ("USAA", "INSURANCE_OTHER", None, "USAA"),
    ("TRAVELERS", "INSURANCE_OTHER", None, "Travelers"),
    ("HARTFORD", "INSURANCE_OTHER", None, "The Hartford"),
    ("CIGNA", "EMPLOYEE_BENEFIT_PROGRAMS", "Health Insurance", "Cigna"),
    ("AETNA", "EMPLOYEE_BENEFIT_PROGRAMS", "Health Insurance", "Aetna"),
    ("BLUE CROSS", "EMPLOYEE_BENEFIT_PROGRAMS", "Health Insurance", "Blue Cross"),
    ("UNITED HEALTH", "EMPLOYEE_BENEFIT_PROGRAMS", "Health Insurance", "United Healthcare"),

    # Shipping & postage
    ("USPS", "OTHER_COSTS", "Shipping to Customer", "USPS"),
    ("UPS", "OTHER_COSTS", "Shipping to Customer", "UPS"),
    ("FEDEX", "OTHER_COSTS", "Shipping to Customer", "FedEx"),
    ("FED EX", "OTHER_COSTS", "Shipping to Customer", "FedEx"),
    ("DHL", "OTHER_COSTS", "Shipping to Customer", "DHL"),
    ("STAMPS.COM", "OTHER_COSTS", "Shipping to Customer", "Stamps.com"),
    ("PIRATESHIP", "OTHER_COSTS", "Shipping to Customer", "Pirate Ship"),
    ("SHIPSTATION", "OTHER_COSTS", "Shipping to Customer", "ShipStation"),

    # Banking & fees
    ("CHASE", "BANK_FEES", None, "Chase"),
    ("BANK OF AMERICA", "BANK_FEES", None, "Bank of America"),
    ("WELLS FARGO", "BANK_FEES", None, "Wells Fargo"),
    ("CITI", "BANK_FEES", None, "Citi"),
    ("CITIBANK", "BANK_FEES", None, "Citi"),
    ("PNC", "BANK_FEES", None, "PNC"),
    ("US BANK", "BANK_FEES", None, "US Bank"),
    ("CAPITAL ONE", "BANK_FEES", None, "Capital One"),
    ("TD BANK", "BANK_FEES", None, "TD Bank"),
    ("TRUIST", "BANK_FEES", None, "Truist"),
    ("REGIONS", "BANK_FEES", None, "Regions"),
    ("SUNTRUST", "BANK_FEES", None, "SunTrust"),
    ("INTEREST CHARGE", "INTEREST_OTHER", "Credit Card Interest", "Interest Charge"),
    ("FINANCE CHARGE", "INTEREST_OTHER", "Credit Card Interest", "Finance Charge"),
    ("MONTHLY SERVICE FEE", "BANK_FEES", None, "Bank Fee"),
    ("OVERDRAFT FEE", "BANK_FEES", None, "Bank Fee"),
    ("ATM FEE", "BANK_FEES", None, "Bank Fee"),
    ("WIRE FEE", "BANK_FEES", None, "Bank Fee"),

    # Payment processing
    ("PAYPAL", "COMMISSIONS_FEES", None, "PayPal"),
    ("STRIPE", "COMMISSIONS_FEES", None, "Stripe"),
    ("SQUARE", "COMMISSIONS_FEES", None, "Square"),
    ("VENMO", "COMMISSIONS_FEES", None, "Venmo"),
    ("BRAINTREE", "COMMISSIONS_FEES", None, "Braintree"),
    ("AUTHORIZE.NET", "COMMISSIONS_FEES", None, "Authorize.net"),
    ("CLOVER", "COMMISSIONS_FEES", None, "Clover"),
    ("TOAST", "COMMISSIONS_FEES", None, "Toast"),

    # Advertising
    ("GOOGLE ADS", "ADVERTISING", "Online Ads (Google, Facebook, etc.)", "Google Ads"),
    ("GOOGLE AD", "ADVERTISING", "Online Ads (Google, Facebook, etc.)", "Google Ads"),
    ("FACEBOOK ADS", "ADVERTISING", "Online Ads (Google, Facebook, etc.)", "Facebook/Meta"),
    ("FB ADS", "ADVERTISING", "Online Ads (Google, Facebook, etc.)", "Facebook/Meta"),
    ("FACEBOOK", "ADVERTISING", "Online Ads (Google, Facebook, etc.)", "Facebook/Meta"),
    ("META ADS", "ADVERTISING", "Online Ads (Google, Facebook, etc.)", "Facebook/Meta"),
    ("META", "ADVERTISING", "Online Ads (Google, Facebook, etc.)", "Facebook/Meta"),
    ("INSTAGRAM", "ADVERTISING", "Online Ads (Google, Facebook, etc.)", "Instagram"),
    ("LINKEDIN ADS", "ADVERTISING", "Online Ads (Google, Facebook, etc.)", "LinkedIn"),
    ("LINKEDIN", "ADVERTISING", "Online Ads (Google, Facebook, etc.)", "LinkedIn"),
    ("YELP", "ADVERTISING", "Directory Listings", "Yelp"),
    ("YELLOW PAGES", "ADVERTISING", "Directory Listings", "Yellow Pages"),
    ("VISTAPRINT", "ADVERTISING", "Business Cards", "VistaPrint"),
    ("MOOCOM", "ADVERTISING", "Business Cards", "Moo"),
    ("MOO.COM", "ADVERTISING", "Business Cards", "Moo"),
    ("TWITTER", "ADVERTISING", "Online Ads (Google, Facebook, etc.)", "Twitter/X"),
    ("TIKTOK", "ADVERTISING", "Online Ads (Google, Facebook, etc.)", "TikTok"),

    # Meals (50% deductible)
    ("MCDONALDS", "MEALS", None, "McDonald's"),
    ("MCDONALD'S", "MEALS", None, "McDonald's"),
    ("STARBUCKS", "MEALS", None, "Starbucks"),
    ("CHIPOTLE", "MEALS", None, "Chipotle"),
    ("SUBWAY", "MEALS", None, "Subway"),
    ("DUNKIN", "MEALS", None, "Dunkin'"),
    ("BURGER KING", "MEALS", None, "Burger King"),
    ("WENDYS", "MEALS", None, "Wendy's"),
    ("WENDY'S", "MEALS", None, "Wendy's"),
    ("TACO BELL", "MEALS", None, "Taco Bell"),
    ("CHICK-FIL-A", "MEALS", None, "Chick-fil-A"),
    ("CHICKFILA", "MEALS", None, "Chick-fil-A"),
    ("CHILIS", "MEALS", None, "Chili's"),
    ("CHILI'S", "MEALS", None, "Chili's"),
    ("APPLEBEES", "MEALS", None, "Applebee's"),
    ("APPLEBEE'S", "MEALS", None, "Applebee's"),
    ("OLIVE GARDEN", "MEALS", None, "Olive Garden"),
    ("PANERA", "MEALS", None, "Panera"),
    ("PANDA EXPRESS", "MEALS", None, "Panda Express"),
    ("FIVE GUYS", "MEALS", None, "Five Guys"),
    ("POPEYES", "MEALS", None, "Popeyes"),
    ("KFC", "MEALS", None, "KFC"),
    ("DOMINOS", "MEALS", None, "Domino's"),
    ("DOMINO'S", "MEALS", None, "Domino's"),
    ("PIZZA HUT", "MEALS", None, "Pizza Hut"),
    ("PAPA JOHN'S", "MEALS", None, "Papa John's"),
    ("PAPA JOHNS", "MEALS", None, "Papa John's"),
    ("DOORDASH", "MEALS", None, "DoorDash"),
    ("GRUBHUB", "MEALS", None, "Grubhub"),
    ("UBER EATS", "MEALS", None, "Uber Eats"),
    ("UBEREATS", "MEALS", None, "Uber Eats"),
    ("POSTMATES", "MEALS", None, "Postmates"),
    ("TST*", "MEALS", None, "Restaurant (Toast)"),
    ("SQ *", "MEALS", None, "Restaurant (Square)"),

    # Travel
    ("UBER", "TRAVEL", None, "Uber"),
    ("LYFT", "TRAVEL", None, "Lyft"),
    ("DELTA", "TRAVEL", None, "Delta Airlines"),
    ("AMERICAN AIRLINES", "TRAVEL", None, "American Airlines"),
    ("UNITED AIRLINES", "TRAVEL", None, "United Airlines"),
    ("SOUTHWEST", "TRAVEL", None, "Southwest Airlines"),
    ("JETBLUE", "TRAVEL", None, "JetBlue"),
    ("SPIRIT", "TRAVEL", None, "Spirit Airlines"),
    ("FRONTIER", "TRAVEL", None, "Frontier Airlines"),
    ("MARRIOTT", "TRAVEL", None, "Marriott"),
    ("HILTON", "TRAVEL", None, "Hilton"),
    ("HYATT", "TRAVEL", None, "Hyatt"),
    ("IHG", "TRAVEL", None, "IHG"),
    ("HOLIDAY INN", "TRAVEL", None, "Holiday Inn"),
    ("HAMPTON INN", "TRAVEL", None, "Hampton Inn"),
    ("BEST WESTERN", "TRAVEL", None, "Best Western"),
    ("AIRBNB", "TRAVEL", None, "Airbnb"),
    ("VRBO", "TRAVEL", None, "VRBO"),
    ("EXPEDIA", "TRAVEL", None, "Expedia"),
    ("BOOKING.COM", "TRAVEL", None, "Booking.com"),
    ("HOTELS.COM", "TRAVEL", None, "Hotels.com"),
    ("KAYAK", "TRAVEL", None, "Kayak"),
    ("PARKING", "CAR_TRUCK_EXPENSES", "Parking & Tolls", "Parking"),
    ("TOLL", "CAR_TRUCK_EXPENSES", "Parking & Tolls", "Toll"),
    ("SUNPASS", "CAR_TRUCK_EXPENSES", "Parking & Tolls", "SunPass"),
    ("E-PASS", "CAR_TRUCK_EXPENSES", "Parking & Tolls", "E-Pass"),
    ("EPASS", "CAR_TRUCK_EXPENSES", "Parking & Tolls", "E-Pass"),
    ("EZPASS", "CAR_TRUCK_EXPENSES", "Parking & Tolls", "EZPass"),
    ("E-ZPASS", "CAR_TRUCK_EXPENSES", "Parking & Tolls", "EZPass"),

    # Legal & professional
    ("LEGALZOOM", "LEGAL_PROFESSIONAL", "Business Registration/Filing Fees", "LegalZoom"),
    ("ROCKET LAWYER", "LEGAL_PROFESSIONAL", "Legal Fees", "Rocket Lawyer"),
    ("NOLO", "LEGAL_PROFESSIONAL", "Legal Fees", "Nolo"),
    ("INC FILE", "LEGAL_PROFESSIONAL", "Business Registration/Filing Fees", "IncFile"),
    ("NORTHWEST REGISTERED", "LEGAL_PROFESSIONAL", "Business Registration/Filing Fees", "Northwest Registered Agent"),
    ("H&R BLOCK", "LEGAL_PROFESSIONAL", "Accounting & Tax Prep", "H&R Block"),
    ("TURBOTAX", "LEGAL_PROFESSIONAL", "Accounting & Tax Prep", "TurboTax"),
    ("TAXACT", "LEGAL_PROFESSIONAL", "Accounting & Tax Prep", "TaxAct"),

    # Dues & memberships
    ("COSTCO", "DUES_MEMBERSHIPS", None, "Costco"),
    ("SAMS CLUB", "DUES_MEMBERSHIPS", None, "Sam's Club"),
    ("SAM'S CLUB", "DUES_MEMBERSHIPS", None, "Sam's Club"),
    ("BJS", "DUES_MEMBERSHIPS", None, "BJ's"),
    ("BJ'S", "DUES_MEMBERSHIPS", None, "BJ's"),
    ("AMAZON PRIME", "DUES_MEMBERSHIPS", None, "Amazon Prime"),

    # Training & education
    ("UDEMY", "TRAINING_EDUCATION", None, "Udemy"),
    ("COURSERA", "TRAINING_EDUCATION", None, "Coursera"),
    ("LINKEDIN LEARNING", "TRAINING_EDUCATION", None, "LinkedIn Learning"),
    ("SKILLSHARE", "TRAINING_EDUCATION", None, "Skillshare"),
    ("MASTERCLASS", "TRAINING_EDUCATION", None, "MasterClass"),
    ("PLURALSIGHT", "TRAINING_EDUCATION", None, "Pluralsight"),

    # General retail
    ("AMAZON", "SUPPLIES", None, "Amazon"),
    ("AMZN", "SUPPLIES", None, "Amazon"),
    ("WALMART", "SUPPLIES", None, "Walmart"),
    ("TARGET", "SUPPLIES", None, "Target"),
    ("BEST BUY", "SUPPLIES", None, "Best Buy"),
    ("BESTBUY", "SUPPLIES", None, "Best Buy"),
    ("IKEA", "OFFICE_EXPENSES", "Office Décor", "IKEA"),

    # Personal / non-deductible
    ("ATM WITHDRAWAL", "OWNER_DRAWS", None, "ATM Withdrawal"),
    ("ATM CASH", "OWNER_DRAWS", None, "ATM Withdrawal"),
    ("CASH WITHDRAWAL", "OWNER_DRAWS", None, "Cash Withdrawal"),
    ("ZELLE", "PERSONAL_TRANSFER", None, "Zelle"),
    ("TRANSFER TO", "PERSONAL_TRANSFER", None, "Transfer"),
    ("TRANSFER FROM", "PERSONAL_TRANSFER", None, "Transfer"),
    ("NETFLIX", "PERSONAL_EXPENSE", None, "Netflix"),
    ("HULU", "PERSONAL_EXPENSE", None, "Hulu"),
    ("DISNEY+", "PERSONAL_EXPENSE", None, "Disney+"),
    ("HBO", "PERSONAL_EXPENSE", None, "HBO Max"),
    ("PARAMOUNT", "PERSONAL_EXPENSE", None, "Paramount+"),
    ("PEACOCK", "PERSONAL_EXPENSE", None, "Peacock"),
    ("GYM", "PERSONAL_EXPENSE", None, "Gym"),
    ("FITNESS", "PERSONAL_EXPENSE", None, "Fitness"),
    ("PLANET FITNESS", "PERSONAL_EXPENSE", None, "Planet Fitness"),
    ("LA FITNESS", "PERSONAL_EXPENSE", None, "LA Fitness"),

    # Income
    ("INTEREST PAYMENT", "OTHER_INCOME", None, "Interest"),
    ("INTEREST EARNED", "OTHER_INCOME", None, "Interest"),
    ("STRIPE TRANSFER", "GROSS_RECEIPTS", None, "Stripe"),
    ("SQUARE DEPOSIT", "GROSS_RECEIPTS", None, "Square"),
]


@dataclass(frozen=True)
class DefaultVendor:
    """One built-in keyword mapping."""

    keyword: str
    category: str
    subcategory: Optional[str]
    vendor: str
    direction: AmountDirection


def _direction(keyword: str, category: str) -> AmountDirection:
    if keyword in DIRECTION_OVERRIDES:
        return DIRECTION_OVERRIDES[keyword]
    if category in INCOME_CATEGORIES:
        return AmountDirection.POSITIVE
    return AmountDirection.NEGATIVE


def load_default_vendors() -> list[DefaultVendor]:
    """Return the table as entries sorted longest keyword first."""
    vendors = [
        DefaultVendor(keyword, category, subcategory, vendor, _direction(keyword, category))
        for keyword, category, subcategory, vendor in DEFAULT_VENDOR_TABLE
    ]
    return sorted(vendors, key=lambda v: len(v.keyword), reverse=True)


DEFAULT_VENDORS = load_default_vendors()
