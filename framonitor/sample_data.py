"""
Sample FRA records for seeding an empty store.
"""

import copy
import datetime
from typing import List, Optional

from framonitor.model import FRARecord

SAMPLE_RECORDS: List[FRARecord] = [
    {
        "date": "01.06.2025",
        "year": 2025,
        "month": "June",
        "state": "Chhattisgarh",
        "individualClaimsReceived": 45000,
        "communityClaimsReceived": 845000,
        "totalClaimsReceived": 890000,
        "individualTitlesDistributed": 28000,
        "communityTitlesDistributed": 453000,
        "totalTitlesDistributed": 481000,
        "claimsRejected": 125000,
        "totalClaimsDisposedOff": 606000,
        "percentageClaimsDisposedOff": 68.1,
        "areaHaIFRTitlesDistributed": 3200000,
        "areaHaCFRTitlesDistributed": 9103000,
        "fileName": "chhattisgarh_fra_june_2025.pdf",
        "fileSize": 2048576,
    },
    {
        "date": "01.06.2025",
        "year": 2025,
        "month": "June",
        "state": "Odisha",
        "individualClaimsReceived": 38000,
        "communityClaimsReceived": 663000,
        "totalClaimsReceived": 701000,
        "individualTitlesDistributed": 25000,
        "communityTitlesDistributed": 437000,
        "totalTitlesDistributed": 462000,
        "claimsRejected": 89000,
        "totalClaimsDisposedOff": 551000,
        "percentageClaimsDisposedOff": 78.6,
        "areaHaIFRTitlesDistributed": 2800000,
        "areaHaCFRTitlesDistributed": 743000,
        "fileName": "odisha_fra_june_2025.pdf",
        "fileSize": 1876543,
    },
    {
        "date": "01.06.2025",
        "year": 2025,
        "month": "June",
        "state": "Telangana",
        "individualClaimsReceived": 32000,
        "communityClaimsReceived": 620000,
        "totalClaimsReceived": 652000,
        "individualTitlesDistributed": 15000,
        "communityTitlesDistributed": 216000,
        "totalTitlesDistributed": 231000,
        "claimsRejected": 156000,
        "totalClaimsDisposedOff": 387000,
        "percentageClaimsDisposedOff": 59.4,
        "areaHaIFRTitlesDistributed": 1800000,
        "areaHaCFRTitlesDistributed": 580000,
        "fileName": "telangana_fra_june_2025.pdf",
        "fileSize": 1654321,
    },
    {
        "date": "01.05.2025",
        "year": 2025,
        "month": "May",
        "state": "Madhya Pradesh",
        "individualClaimsReceived": 28000,
        "communityClaimsReceived": 392000,
        "totalClaimsReceived": 420000,
        "individualTitlesDistributed": 18000,
        "communityTitlesDistributed": 262000,
        "totalTitlesDistributed": 280000,
        "claimsRejected": 78000,
        "totalClaimsDisposedOff": 358000,
        "percentageClaimsDisposedOff": 85.2,
        "areaHaIFRTitlesDistributed": 2100000,
        "areaHaCFRTitlesDistributed": 1464000,
        "fileName": "mp_fra_may_2025.pdf",
        "fileSize": 1523456,
    },
    {
        "date": "01.05.2025",
        "year": 2025,
        "month": "May",
        "state": "Jharkhand",
        "individualClaimsReceived": 22000,
        "communityClaimsReceived": 358000,
        "totalClaimsReceived": 380000,
        "individualTitlesDistributed": 12000,
        "communityTitlesDistributed": 178000,
        "totalTitlesDistributed": 190000,
        "claimsRejected": 95000,
        "totalClaimsDisposedOff": 285000,
        "percentageClaimsDisposedOff": 75.0,
        "areaHaIFRTitlesDistributed": 1500000,
        "areaHaCFRTitlesDistributed": 425000,
        "fileName": "jharkhand_fra_may_2025.pdf",
        "fileSize": 1432109,
    },
]


def sample_records(now: Optional[datetime.datetime] = None) -> List[FRARecord]:
    """
    Return fresh copies of the sample records stamped with an upload date.
    """
    stamp = (now or datetime.datetime.now(datetime.timezone.utc)).isoformat().replace("+00:00", "Z")
    records = copy.deepcopy(SAMPLE_RECORDS)
    for record in records:
        record["uploadDate"] = stamp
    return records
