"""Shared pytest fixtures for machine reconciliation tests."""

import pytest

from machine_info.models import BillingAddress, PermissionScope


@pytest.fixture
def distributor_document():
    """Distributor machine master document with embedded lists."""
    return {
        "trModel": "PC210LC-11",
        "sN": "A12345",
        "pin": "KMTPC210C01A12345",
        "productType": "Excavator",
        "kgpOrgName": "Northern Equipment",
        "kgpOrgId": "1001",
        "locationDbName": "NE-Main",
        "area1": "Midwest",
        "area2": "Great Lakes",
        "machineType": "Komtrax",
        "oem": None,
        "customerNameML": [{"name": "Johnson Excavating", "accNo": "C-778"}],
        "buildLocationDMM": "Chattanooga",
        "buildDateDMM": "2021-05-14",
        "engineModel": "SAA6D107E-3",
        "salesType": "Retail",
        "invoicedToDistributorDateDMM": "2021-06-01",
        "firstInDirtDateDMM": "",
        "finalDeliveryDate": "not-a-date",
        "telemetry": [
            {
                "gpsUpTime": "2024-01-10",
                "smrUpTime": "2024-02-01",
                "smr": "1200.5",
                "smrSource": "Komtrax",
                "lat": "41.8781",
                "lon": "-87.6298",
                "etlMachineId": "00042",
            }
        ],
        "machineAlerts": [
            {"alertType": "Cross Border In", "triggeredAt": "2024-01-03"},
            {"alertType": " pm job "},
            {"alertType": "PM Job"},
            {"alertType": "Komatsu Care"},
        ],
        "territory": [
            {"catId": "3", "territoryName": "North", "territoryOwner": "Smith",
             "groupName": "Great Lakes", "groupOwner": "Adams"},
            {"catId": "2", "territoryName": "Region 2", "territoryOwner": "Jones",
             "groupName": "Central", "groupOwner": "Baker"},
        ],
        "pic": [
            {"catId": "2", "name": "Pat Service"},
            {"catId": "3", "name": "Riley Sales"},
        ],
    }


@pytest.fixture
def trunk_document():
    """Trunk serial master document with embedded lists."""
    return {
        "salesModel": "D61PXi-24",
        "sN": "B5001",
        "pinNumber": "KMTD061XJ01B5001",
        "productType": "Dozer",
        "organizationName": "Southern Machinery",
        "kgpOrgId": "2002",
        "locationDbName": "SM-East",
        "area1": "South",
        "area2": "Gulf",
        "machineType": "Non-Komatsu",
        "oem": "Caterpillar",
        "customerName": "Gulf Coast Paving",
        "customerAddress": "12 Harbor Rd, Mobile, AL, 36602, US",
        "buildLocation": "Awazu",
        "buildDate": "2020-11-02",
        "engineModel": "SAA6D114E-6",
        "salesType": "Rental",
        "invoicedToDistributorDate": "2020-12-01",
        "firstInDirtDate": "2021-01-15",
        "finalDeliveryDate": "2021-01-20",
        "telemetry": [
            {
                "gpsUpTime": "2024-03-05",
                "smrUpTime": "garbage",
                "smr": "845",
                "smrSource": "Manual",
                "lat": "30.6954",
                "lon": "-88.0399",
                "etlMachineId": "0",
            }
        ],
        "machineAlerts": None,
        "territory": [
            {"catId": "2", "territoryName": "Gulf", "territoryOwner": "Lee",
             "groupName": "South", "groupOwner": "Kim"},
            {"catId": "3", "territoryName": "Ignored", "territoryOwner": "Nobody",
             "groupName": "Ignored", "groupOwner": "Nobody"},
        ],
        "pic": None,
    }


@pytest.fixture
def full_scope():
    """Permission scope covering organizations 1001 and 2002 for every field group."""
    org_ids = {"1001", "2002"}
    return PermissionScope(
        customer_name_org_ids=set(org_ids),
        personal_info_org_ids=set(org_ids),
        map_org_ids=set(org_ids),
    )


@pytest.fixture
def billing_address():
    return BillingAddress(
        street1="400 Lake St",
        street2="Suite 5",
        city="Chicago",
        state="IL",
        zip_code="60601",
        country="US",
    )
