from leave_approval.models.base.enums import UserRole
from leave_approval.models.user.user import User


def seed_users(session):
    """Directory used across the workflow tests, keyed by a short handle."""
    mentor_cse_3 = User(email="meera@college.edu", name="Meera Iyer", role=UserRole.MENTOR,
                        department="CSE", year="3")
    mentor_cse_2 = User(email="arjun@college.edu", name="Arjun Das", role=UserRole.MENTOR,
                        department="CSE", year="2")
    hod_cse = User(email="hod.cse@college.edu", name="Dr. Kavita Shah", role=UserRole.HOD,
                   department="CSE")
    hod_ece = User(email="hod.ece@college.edu", name="Dr. Ravi Nair", role=UserRole.HOD,
                   department="ECE")
    principal = User(email="principal@college.edu", name="Dr. Anand Rao", role=UserRole.PRINCIPAL)
    warden = User(email="warden@college.edu", name="Suresh Pillai", role=UserRole.WARDEN)
    admin = User(email="admin@college.edu", name="Office Admin", role=UserRole.ADMIN)
    session.add_all([mentor_cse_3, mentor_cse_2, hod_cse, hod_ece, principal, warden, admin])
    session.flush()

    student = User(email="asha@college.edu", name="Asha Rao", role=UserRole.STUDENT,
                   department="CSE", year="3", roll_number="21CS042", hostel_resident=False,
                   assigned_mentor_id=mentor_cse_3.id)
    hostel_student = User(email="vikram@college.edu", name="Vikram Sen", role=UserRole.STUDENT,
                          department="CSE", year="3", roll_number="21CS077", hostel_resident=True)
    orphan_student = User(email="nisha@college.edu", name="Nisha Verma", role=UserRole.STUDENT,
                          department="MECH", year="1", roll_number="24ME003")
    session.add_all([student, hostel_student, orphan_student])
    session.commit()

    return {
        "mentor": mentor_cse_3,
        "mentor_year_2": mentor_cse_2,
        "hod": hod_cse,
        "hod_ece": hod_ece,
        "principal": principal,
        "warden": warden,
        "admin": admin,
        "student": student,
        "hostel_student": hostel_student,
        "orphan_student": orphan_student,
    }
