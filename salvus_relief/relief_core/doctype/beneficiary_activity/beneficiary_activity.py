from frappe.model.document import Document


class BeneficiaryActivity(Document):
    pass
