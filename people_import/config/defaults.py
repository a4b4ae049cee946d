"""Built-in Planning Center dictionaries.

Header names -> person field, and free-text membership labels -> MemberStatus
value. Both are overridable through config/import.yml.
"""

DEFAULT_FIELD_MAPPINGS: dict[str, str] = {
    "First Name": "first_name",
    "first_name": "first_name",
    "Last Name": "last_name",
    "last_name": "last_name",
    "Email": "email",
    "email": "email",
    "Primary Email": "email",
    "Phone": "phone",
    "phone": "phone",
    "Mobile Phone": "phone",
    "Home Phone": "phone",
    "Cell Phone": "phone",
    "Address": "address",
    "address": "address",
    "Street": "address",
    "Street Address": "address",
    "City": "city",
    "city": "city",
    "State": "state",
    "state": "state",
    "Province": "state",
    "Zip": "zip",
    "zip": "zip",
    "Postal Code": "zip",
    "ZIP Code": "zip",
    "Birthdate": "birth_date",
    "birthdate": "birth_date",
    "Birthday": "birth_date",
    "Date of Birth": "birth_date",
    "Membership Status": "status",
    "membership_status": "status",
    "Status": "status",
    "Membership Date": "join_date",
    "Join Date": "join_date",
    "First Visit": "first_visit",
    "first_visit": "first_visit",
    "Notes": "notes",
    "notes": "notes",
    "Tags": "tags",
}

DEFAULT_STATUS_MAPPINGS: dict[str, str] = {
    "Visitor": "visitor",
    "visitor": "visitor",
    "Guest": "visitor",
    "guest": "visitor",
    "New": "visitor",
    "new": "visitor",
    "Regular Attender": "regular",
    "regular_attender": "regular",
    "Regular": "regular",
    "regular": "regular",
    "Attendee": "regular",
    "attendee": "regular",
    "Member": "member",
    "member": "member",
    "Active Member": "member",
    "Active": "member",
    "active": "member",
    "Leader": "leader",
    "leader": "leader",
    "Staff": "leader",
    "staff": "leader",
    "Pastor": "leader",
    "pastor": "leader",
    "Inactive": "inactive",
    "inactive": "inactive",
    "Former": "inactive",
    "former": "inactive",
    "Lapsed": "inactive",
    "lapsed": "inactive",
}

# Normalized header (lowercase, [a-z0-9] only) -> person field.
# Only consulted when guess_headers is enabled.
GUESS_MAPPINGS: dict[str, str] = {
    "firstname": "first_name",
    "first": "first_name",
    "fname": "first_name",
    "givenname": "first_name",
    "lastname": "last_name",
    "last": "last_name",
    "lname": "last_name",
    "surname": "last_name",
    "familyname": "last_name",
    "email": "email",
    "emailaddress": "email",
    "mail": "email",
    "phone": "phone",
    "telephone": "phone",
    "mobile": "phone",
    "cell": "phone",
    "phonenumber": "phone",
    "status": "status",
    "memberstatus": "status",
    "type": "status",
    "address": "address",
    "streetaddress": "address",
    "street": "address",
    "address1": "address",
    "city": "city",
    "town": "city",
    "state": "state",
    "province": "state",
    "region": "state",
    "zip": "zip",
    "zipcode": "zip",
    "postalcode": "zip",
    "postal": "zip",
    "birthday": "birth_date",
    "birthdate": "birth_date",
    "dob": "birth_date",
    "dateofbirth": "birth_date",
    "joindate": "join_date",
    "membershipdate": "join_date",
    "joined": "join_date",
    "firstvisit": "first_visit",
    "visitdate": "first_visit",
    "notes": "notes",
    "comments": "notes",
    "note": "notes",
    "tags": "tags",
    "groups": "tags",
    "categories": "tags",
}
