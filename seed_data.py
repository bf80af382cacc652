import random
from datetime import datetime, timedelta
from extensions import db
from app import create_app
from models import (
    Agency, EmergencyHotline, Complaint, ComplaintStatusUpdate, User,
    COMPLAINT_CATEGORIES, COMPLAINT_STATUSES,
)

# ====== CONFIG ======
NUM_COMPLAINTS = 80
DAYS_BACK = 365
BARANGAYS = ["Poblacion", "San Isidro", "Santa Cruz", "San Roque", "Bagong Silang", "Mabini"]
# =====================

AGENCIES = [
    ("Philippine Statistics Authority (PSA)", "https://psa.gov.ph/", "government",
     "Access your Digital National ID (PhilSys), request Birth, Marriage, and Death certificates, "
     "and manage civil registry documents."),
    ("Government Service Insurance System (GSIS)", "https://www.gsis.gov.ph/", "finance",
     "View membership records, check loan status, and access social insurance benefits for government employees."),
    ("Social Security System (SSS)", "https://www.sss.gov.ph/", "finance",
     "Manage private sector social security contributions, apply for salary loans, and view benefit claims."),
    ("Philippine Health Insurance Corp. (PhilHealth)", "https://www.philhealth.gov.ph/", "healthcare",
     "Access your virtual PhilHealth ID, check contribution history, and view member benefits."),
    ("Pag-IBIG Fund (HDMF)", "https://www.pagibigfund.gov.ph/", "finance",
     "Manage housing loans, view MP2 savings, and check regular contribution records."),
    ("Land Transportation Office (LTO)", "https://lto.gov.ph/", "transport",
     "Access your Digital Driver's License, view violations, and renew motor vehicle registration."),
    ("Department of Foreign Affairs (DFA)", "https://dfa.gov.ph/", "government",
     "Schedule passport appointments and view requirements for passport renewal and application."),
    ("National Bureau of Investigation (NBI)", "https://nbi.gov.ph/", "legal",
     "Apply for NBI Clearance, schedule appointments, and renew existing clearances."),
    ("Department of Migrant Workers (DMW) / OWWA", "https://www.dmw.gov.ph/", "social_services",
     "Access the OFW Pass, manage Overseas Employment Certificates (OEC), and access welfare services."),
]

HOTLINES = [
    ("City Police Station", "0998 598 5134", "Smart", None, "police"),
    ("Bureau of Fire Protection", "0927 154 2345", "Globe", None, "fire"),
    ("City Health Office", "(054) 472 3000", "Landline", None, "medical"),
    ("CDRRMO Rescue", "0908 525 3000", "Smart", None, "rescue"),
    ("Barangay Poblacion Tanod", "0963 220 9700", "TNT", "Poblacion", "police"),
    ("Barangay San Isidro Health Center", "0917 555 0101", "Globe", "San Isidro", "medical"),
]

SAMPLE_TITLES = {
    "Road and Infrastructure": "Large pothole on the main road",
    "Street Lighting": "Street lights not working at night",
    "Waste Management": "Garbage has not been collected for a week",
    "Water and Drainage": "Clogged drainage causing flooding",
    "Public Safety": "Broken railing near the footbridge",
    "Noise Complaint": "Loud karaoke past midnight every weekend",
    "Other": "Stray dogs roaming near the school",
}


def random_datetime(days_back):
    return datetime.utcnow() - timedelta(
        days=random.randint(0, days_back), hours=random.randint(0, 23), minutes=random.randint(0, 59)
    )


def create_agencies():
    print("🏛️ Creating agencies...")
    created = 0
    for name, link, category, description in AGENCIES:
        if Agency.query.filter_by(name=name).first():
            continue
        db.session.add(Agency(name=name, external_link=link, category=category, description=description))
        created += 1
    db.session.commit()
    print(f"✅ Created {created} agencies.")


def create_hotlines():
    print("📞 Creating emergency hotlines...")
    created = 0
    for label, number, sim_type, barangay, category in HOTLINES:
        if EmergencyHotline.active().filter_by(label=label).first():
            continue
        db.session.add(EmergencyHotline(
            label=label, number=number, sim_type=sim_type, barangay=barangay, category=category
        ))
        created += 1
    db.session.commit()
    print(f"✅ Created {created} hotlines.")


def create_complaints():
    print("📝 Creating sample complaints...")
    citizens = User.query.filter_by(role="citizen").all()
    admin = User.query.filter_by(role="admin").first()

    complaints = []
    for i in range(NUM_COMPLAINTS):
        category = random.choice(COMPLAINT_CATEGORIES)
        status = random.choice(COMPLAINT_STATUSES)
        created_at = random_datetime(DAYS_BACK)
        updated_at = created_at if status == "pending" else created_at + timedelta(days=random.randint(1, 20))
        complaint = Complaint(
            title=f"{SAMPLE_TITLES[category]} #{i + 1}",
            content=f"{SAMPLE_TITLES[category]}. Residents have reported this several times and it needs attention.",
            category=category,
            location=f"Purok {random.randint(1, 7)}",
            barangay=random.choice(BARANGAYS),
            status=status,
            is_public=random.random() < 0.8,
            view_count=random.randint(0, 200),
            created_at=created_at,
            updated_at=min(updated_at, datetime.utcnow()),
        )
        if citizens and random.random() < 0.7:
            complaint.user_id = random.choice(citizens).id
            complaint.is_anonymous = random.random() < 0.2
        else:
            complaint.is_anonymous = True
            complaint.guest_name = "Juan Dela Cruz"
            complaint.guest_phone = "09171234567"
        complaints.append(complaint)

    db.session.add_all(complaints)
    db.session.commit()

    if admin:
        for c in complaints:
            if c.status != "pending":
                db.session.add(ComplaintStatusUpdate(
                    complaint_id=c.id, admin_id=admin.id, from_status="pending",
                    status=c.status, created_at=c.updated_at,
                ))
        db.session.commit()
    print(f"✅ Created {len(complaints)} complaints.")


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        create_agencies()
        create_hotlines()
        create_complaints()
        print("🎉 Done seeding sample data!")
