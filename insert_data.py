from pymongo import MongoClient

from config import COLLECTION_NAME, DB_NAME, MONGODB_URI
from models import InternshipRecord, create_indexes

SAMPLE_INTERNSHIPS = [
    InternshipRecord(
        internship_id=1, title="Data Science Intern", company_name="DataCorp",
        description="Analyze datasets for insights", sector="Technology",
        skills=["python", "machine learning"], min_education="graduate",
        location_city="Bangalore", location_state="Karnataka", duration_weeks=12,
        stipend=15000, mode="On-site", application_link="https://datacorp.example/apply",
        posted_date="2025-09-01", application_deadline="2025-10-15", slots_available=3,
        company_size="51-200", remote_work_allowed=False, certificate_provided=True,
    ),
    InternshipRecord(
        internship_id=2, title="Backend Developer Intern", company_name="TechSoft",
        description="Assist in backend APIs", sector="Technology",
        skills=["python", "django"], min_education="diploma",
        location_city="Chennai", location_state="Tamil Nadu", duration_weeks=8,
        stipend=12000, mode="Hybrid", application_link="https://techsoft.example/apply",
        posted_date="2025-09-05", application_deadline="2025-10-20", slots_available=2,
        company_size="11-50", remote_work_allowed=True, certificate_provided=True,
    ),
    InternshipRecord(
        internship_id=3, title="Machine Learning Intern", company_name="AI Labs",
        description="Build ML models and process data", sector="Technology",
        skills=["python", "data analysis", "tensorflow"], min_education="graduate",
        location_city="Hyderabad", location_state="Telangana", duration_weeks=16,
        stipend=20000, mode="Remote", application_link="https://ailabs.example/apply",
        posted_date="2025-09-10", application_deadline="2025-11-01", slots_available=4,
        company_size="201-500", remote_work_allowed=True, certificate_provided=False,
    ),
    InternshipRecord(
        internship_id=4, title="Front-end Developer Intern", company_name="WebWorks",
        description="Develop UI using React", sector="Technology",
        skills=["javascript", "css", "react"], min_education="12th",
        location_city="Mumbai", location_state="Maharashtra", duration_weeks=10,
        stipend=10000, mode="On-site", application_link="https://webworks.example/apply",
        posted_date="2025-09-12", application_deadline="2025-10-30", slots_available=1,
        company_size="11-50", remote_work_allowed=False, certificate_provided=True,
    ),
    InternshipRecord(
        internship_id=5, title="Financial Analyst Intern", company_name="CloudNet Finance",
        description="Analyze reports and build forecasts", sector="Finance",
        skills=["excel", "data analysis"], min_education="graduate",
        location_city="Pune", location_state="Maharashtra", duration_weeks=12,
        stipend=18000, mode="Hybrid", application_link="https://cloudnet.example/apply",
        posted_date="2025-09-15", application_deadline="2025-11-10", slots_available=2,
        company_size="501-1000", remote_work_allowed=False, certificate_provided=True,
    ),
]


def insert_sample_data():
    db = MongoClient(MONGODB_URI)[DB_NAME]
    collection = db[COLLECTION_NAME]

    collection.delete_many({})
    collection.insert_many([i.model_dump() for i in SAMPLE_INTERNSHIPS])
    create_indexes(db)
    print("Sample data inserted successfully.")


if __name__ == "__main__":
    insert_sample_data()
