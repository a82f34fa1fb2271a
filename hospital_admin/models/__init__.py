# hospital_admin/models/__init__.py
from hospital_admin.models.base import Base
from hospital_admin.models.user import RevokedToken, StaffRole, User
from hospital_admin.models.patient import Patient
from hospital_admin.models.appointment import Appointment
from hospital_admin.models.consultation import Consultation
from hospital_admin.models.billing import Bill, BillItem
from hospital_admin.models.lab_request import LabRequest
from hospital_admin.models.pharmacy import Medication, PharmacySale
from hospital_admin.models.ward import Admission, Ward
from hospital_admin.models.maternity import MaternityRecord
from hospital_admin.models.optical import OpticalInventoryItem, OpticalRecord
