"""Sample data and small request helpers shared by the API tests."""

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin-pass-123"

SAMPLE_COMPANIES = [
    dict(
        slug="rusty-support-ab",
        name="Rusty Support AB",
        description="Service och reparationer av industrimaskiner.",
        categories=["Service", "Reparation"],
        region="Stockholm",
        city="Stockholm",
        location="Stockholm, Sverige",
    ),
    dict(
        slug="precision-tech-ab",
        name="Precision Tech AB",
        description="Specialiserade på CNC-bearbetning och precisionstillverkning.",
        categories=["CNC-bearbetning", "Precisionsdelar"],
        region="Västra Götaland",
        city="Borås",
        location="Borås, Sverige",
        is_featured=True,
        is_verified=True,
    ),
    dict(
        slug="hydrotech-solutions",
        name="HydroTech Solutions",
        description="Leverantör av hydrauliska system och komponenter.",
        categories=["Hydraulik", "Service"],
        service_areas=["Västra Götaland", "Halland"],
        region="Västra Götaland",
        city="Göteborg",
        location="Göteborg, Sverige",
    ),
    dict(
        slug="autoindustri-nord",
        name="AutoIndustri Nord",
        description="Automationslösningar och robotik för modern industri.",
        categories=["Automation", "Robotik"],
        region="Skåne",
        city="Malmö",
        location="Malmö, Sverige",
    ),
]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def submit_claim(client, slug="rusty-support-ab", email="owner@example.com", **extra):
    payload = {
        "companySlug": slug,
        "name": "Olle Ägare",
        "email": email,
        "phone": "08-123 45 67",
        "message": "Jag är VD för företaget.",
        "consent": True,
    }
    payload.update(extra)
    return client.post("/api/claim-requests", json=payload)


def approve(client, claim_id, headers):
    return client.post(f"/api/admin/claim-requests/{claim_id}/approve", headers=headers)
