"""
Script to seed dummy data for local development
Run with: python -m app.scripts.seed_dummy_data
"""
import asyncio
import random
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from app.database import AsyncSessionLocal, init_db
from app.models.user import User, UserRole
from app.models.aadhaar_record import AadhaarRecord
from app.models.center import Center
from app.models.update_type import UpdateType
from app.models.time_slot import TimeSlot
from app.models.center_load import CenterLoad, DemandForecast
from app.core.security import get_password_hash
from datetime import date, time, timedelta
from sqlalchemy import select

ADMIN = {
    "email": "admin@aadhaar-advance.com", "phone": "+919800000000", "password": "admin123",
    "aadhaar_number": "999900000001", "full_name": "Admin User",
}

CITIZENS = [
    {
        "email": "john.doe@example.com", "phone": "+919876543210", "aadhaar_number": "123456789012",
        "full_name": "John Doe", "date_of_birth": date(1990, 5, 15), "gender": "Male",
        "address": "123 Main Street, Apt 4B, Near Station Road", "state": "Maharashtra", "district": "Mumbai",
        "city": "Mumbai", "pincode": "400001", "locality": "Fort Area", "landmark": "Near CST Station",
        "house_number": "123", "street": "Main Street", "enrollment_number": "E/2019/123456789",
        "enrollment_date": date(2019, 3, 15), "registration_center": "Mumbai Central Enrolment Center",
    },
    {
        "email": "sarah.smith@example.com", "phone": "+919876543211", "aadhaar_number": "234567890123",
        "full_name": "Sarah Smith", "date_of_birth": date(1985, 8, 22), "gender": "Female",
        "address": "456 Oak Avenue, Whitefield", "state": "Karnataka", "district": "Bangalore",
        "city": "Bangalore", "pincode": "560001", "locality": "Whitefield", "landmark": "Near IT Park",
        "house_number": "456", "street": "Oak Avenue", "enrollment_number": "E/2018/987654321",
        "enrollment_date": date(2018, 6, 20), "registration_center": "Bangalore Whitefield Enrolment Center",
    },
    {
        "email": "rajesh.kumar@example.com", "phone": "+919876543212", "aadhaar_number": "345678901234",
        "full_name": "Rajesh Kumar", "date_of_birth": date(1992, 11, 8), "gender": "Male",
        "address": "789 Park Road, Near Bus Stand", "state": "Tamil Nadu", "district": "Chennai",
        "city": "Chennai", "pincode": "600001", "locality": "T Nagar", "landmark": "Near US Consulate",
        "house_number": "789", "street": "Park Road", "enrollment_number": "E/2020/456789123",
        "enrollment_date": date(2020, 1, 10), "registration_center": "Chennai T Nagar Enrolment Center",
    },
    {
        "email": "priya.sharma@example.com", "phone": "+919876543213", "aadhaar_number": "456789012345",
        "full_name": "Priya Sharma", "date_of_birth": date(1988, 3, 30), "gender": "Female",
        "address": "321 Lake View, Connaught Place", "state": "Delhi", "district": "Central Delhi",
        "city": "New Delhi", "pincode": "110001", "locality": "Connaught Place", "landmark": "Near Metro Station",
        "house_number": "321", "street": "Lake View Road", "enrollment_number": "E/2017/789123456",
        "enrollment_date": date(2017, 8, 5), "registration_center": "Delhi CP Enrolment Center",
    },
    {
        "email": "amit.patel@example.com", "phone": "+919876543214", "aadhaar_number": "567890123456",
        "full_name": "Amit Patel", "date_of_birth": date(1995, 7, 12), "gender": "Male",
        "address": "654 River Side, SG Highway", "state": "Gujarat", "district": "Ahmedabad",
        "city": "Ahmedabad", "pincode": "380001", "locality": "SG Highway", "landmark": "Near Mall",
        "house_number": "654", "street": "River Side Road", "enrollment_number": "E/2021/321654987",
        "enrollment_date": date(2021, 2, 18), "registration_center": "Ahmedabad SG Highway Enrolment Center",
    },
]
CITIZEN_PASSWORD = "password123"

CENTERS = [
    ("Aadhaar Seva Kendra - Mumbai Central", "Mumbai", "Maharashtra", "400001", "Ground Floor, Business Tower, Near CST Station", 500, 18.9398, 72.8354, "+91 22 2345 6789", "mumbai.central@aadhaar.gov.in", time(9), time(18)),
    ("Aadhaar Seva Kendra - Bangalore MG Road", "Bangalore", "Karnataka", "560001", "1st Floor, City Center, MG Road", 450, 12.9750, 77.6060, "+91 80 2345 6789", "bangalore.mgroad@aadhaar.gov.in", time(9), time(17)),
    ("Aadhaar Seva Kendra - Chennai T Nagar", "Chennai", "Tamil Nadu", "600017", "No. 45, Usman Road, T Nagar", 400, 13.0418, 80.2341, "+91 44 2345 6789", "chennai.tnagar@aadhaar.gov.in", time(9), time(17, 30)),
    ("Aadhaar Seva Kendra - Delhi Connaught Place", "New Delhi", "Delhi", "110001", "Block A, Shop No. 12, Inner Circle, CP", 600, 28.6315, 77.2197, "+91 11 2345 6789", "delhi.cp@aadhaar.gov.in", time(10), time(18)),
    ("Aadhaar Seva Kendra - Ahmedabad SG Highway", "Ahmedabad", "Gujarat", "380015", "2nd Floor, Westgate Mall, SG Highway", 350, 23.0267, 72.5791, "+91 79 2345 6789", "ahmedabad.sghighway@aadhaar.gov.in", time(9), time(17)),
    ("Aadhaar Seva Kendra - Kolkata Park Street", "Kolkata", "West Bengal", "700016", "No. 78, Park Street Area", 420, 22.5526, 88.3520, "+91 33 2345 6789", "kolkata.parkstreet@aadhaar.gov.in", time(10), time(17, 30)),
    ("Aadhaar Seva Kendra - Hyderabad Gachibowli", "Hyderabad", "Telangana", "500032", "2-48/1, Survey No. 41, Gachibowli", 380, 17.4401, 78.3408, "+91 40 2345 6789", "hyderabad.gachibowli@aadhaar.gov.in", time(9), time(18)),
    ("Aadhaar Seva Kendra - Pune Koregaon Park", "Pune", "Maharashtra", "411001", "Shop No. 101, Koregaon Park Plaza", 320, 18.5362, 73.8946, "+91 20 2345 6789", "pune.koregaonpark@aadhaar.gov.in", time(9), time(17)),
]

UPDATE_TYPES = [
    # name, description, risk, verification, biometric, online, minutes
    ("Address Update", "Update your residential address in Aadhaar", "medium", True, True, True, 15),
    ("Date of Birth Correction", "Correct your date of birth in Aadhaar", "high", True, True, False, 20),
    ("Mobile Number Update", "Update or change your registered mobile number", "low", True, False, True, 5),
    ("Email Update", "Update your email address", "low", False, False, True, 3),
    ("Name Correction", "Correct spelling or update name", "high", True, True, False, 25),
    ("Gender Update", "Update gender information", "high", True, True, False, 20),
    ("Biometric Update", "Update fingerprints and iris scan", "medium", True, True, False, 30),
    ("Photo Update", "Update your photograph in Aadhaar", "medium", True, True, False, 15),
]

SLOT_TIMES = [(time(9), time(10)), (time(10), time(11)), (time(11), time(12)), (time(14), time(15)), (time(15), time(16))]
SLOT_CAPACITY = 10
SEED_DAYS = 2


async def seed_data():
    """Seed dummy data"""
    print("Seeding dummy data...")
    await init_db()

    async with AsyncSessionLocal() as db:
        print("Checking for existing users...")
        admin_result = await db.execute(select(User).where(User.email == ADMIN["email"]))
        if not admin_result.scalar_one_or_none():
            print("Creating admin user...")
            admin_user = User(
                email=ADMIN["email"],
                phone=ADMIN["phone"],
                password_hash=get_password_hash(ADMIN["password"]),
                role=UserRole.ADMIN,
                is_active=True
            )
            db.add(admin_user)
            await db.flush()
            db.add(AadhaarRecord(
                user_id=admin_user.id,
                aadhaar_number=ADMIN["aadhaar_number"],
                full_name=ADMIN["full_name"],
                phone=ADMIN["phone"],
                is_verified=True,
                mobile_verified=True,
                email_verified=True
            ))
        else:
            print("Admin user already exists, skipping...")

        for citizen in CITIZENS:
            result = await db.execute(
                select(AadhaarRecord.id).where(AadhaarRecord.aadhaar_number == citizen["aadhaar_number"])
            )
            if result.scalar_one_or_none():
                print(f"Record {citizen['aadhaar_number']} already exists, skipping...")
                continue

            user = User(
                email=citizen["email"],
                phone=citizen["phone"],
                password_hash=get_password_hash(CITIZEN_PASSWORD),
                role=UserRole.CITIZEN,
                is_active=True
            )
            db.add(user)
            await db.flush()

            record_fields = {k: v for k, v in citizen.items() if k != "email"}
            db.add(AadhaarRecord(
                user_id=user.id,
                status="active",
                is_verified=True,
                is_eid_linked=True,
                mobile_verified=True,
                email_verified=True,
                **record_fields
            ))
        print(f"Citizens ready ({len(CITIZENS)})")

        centers = []
        for (name, city, state, pincode, address, capacity, lat, lng, phone, email, start, end) in CENTERS:
            result = await db.execute(select(Center).where(Center.name == name))
            center = result.scalar_one_or_none()
            if center is None:
                center = Center(
                    name=name, city=city, state=state, pincode=pincode, address=address,
                    capacity=capacity, latitude=lat, longitude=lng, phone=phone, email=email,
                    working_hours_start=start, working_hours_end=end, is_active=True
                )
                db.add(center)
            centers.append(center)
        await db.flush()
        print(f"Centers ready ({len(centers)})")

        for (name, description, risk, verification, biometric, online, minutes) in UPDATE_TYPES:
            result = await db.execute(select(UpdateType.id).where(UpdateType.name == name))
            if result.scalar_one_or_none() is None:
                db.add(UpdateType(
                    name=name, description=description, risk_level=risk,
                    requires_verification=verification, requires_biometric=biometric,
                    can_do_online=online, estimated_time_minutes=minutes, is_active=True
                ))
        print(f"Update types ready ({len(UPDATE_TYPES)})")

        seed_dates = [date.today() + timedelta(days=offset) for offset in range(1, SEED_DAYS + 1)]
        slots_created = 0
        for center in centers:
            for slot_date in seed_dates:
                result = await db.execute(
                    select(TimeSlot.id).where(TimeSlot.center_id == center.id, TimeSlot.date == slot_date)
                )
                if result.first():
                    continue
                for start, end in SLOT_TIMES:
                    db.add(TimeSlot(
                        center_id=center.id,
                        date=slot_date,
                        start_time=start,
                        end_time=end,
                        total_capacity=SLOT_CAPACITY,
                        available_slots=random.randint(1, SLOT_CAPACITY),
                        risk_level=random.choice(["low", "medium", "high"]),
                        is_active=True
                    ))
                    slots_created += 1

                current_load = random.randint(0, center.capacity - 1)
                db.add(CenterLoad(
                    center_id=center.id,
                    date=slot_date,
                    current_load=current_load,
                    predicted_load=int(current_load * 1.1),
                    capacity=center.capacity,
                    occupancy_percentage=round(current_load / center.capacity * 100, 2)
                ))
                db.add(DemandForecast(
                    center_id=center.id,
                    forecast_date=slot_date,
                    predicted_demand=int(current_load * 1.1)
                ))
        print(f"Created {slots_created} time slots with center loads and forecasts")

        await db.commit()
        print("\n✅ Dummy data seeded successfully!")
        print("\nLogin credentials (aadhaar number / password):")
        print(f"Admin: {ADMIN['aadhaar_number']} / {ADMIN['password']}")
        print(f"Citizen: {CITIZENS[0]['aadhaar_number']} / {CITIZEN_PASSWORD}")
        print(f"Citizen: {CITIZENS[1]['aadhaar_number']} / {CITIZEN_PASSWORD}")


if __name__ == "__main__":
    asyncio.run(seed_data())
