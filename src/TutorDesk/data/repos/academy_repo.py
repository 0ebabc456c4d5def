import logging
from dataclasses import replace
from TutorDesk.data.db import tx
from TutorDesk.core.models import AcademyProfile, DEFAULT_ACADEMY

logger = logging.getLogger(__name__)

ACADEMY_KEY = "main"


def get_academy_info():
	"""The academy profile; the default profile is stored on first access."""
	with tx() as conn:
		c = conn.cursor()
		c.execute("SELECT * FROM academy_info WHERE id = ?", (ACADEMY_KEY,))
		row = c.fetchone()
	if row is None:
		return save_academy_info(replace(DEFAULT_ACADEMY))
	return AcademyProfile(
		name=row["name"],
		address=row["address"] or "",
		email=row["email"] or "",
		contact=row["contact"] or "",
		logo_path=row["logo_path"] or None,
	)


def save_academy_info(profile):
	"""Replace the whole profile."""
	with tx() as conn:
		conn.execute(
			"""
			REPLACE INTO academy_info (id, name, address, email, contact, logo_path)
			VALUES (?, ?, ?, ?, ?, ?)
			""",
			(ACADEMY_KEY, profile.name, profile.address, profile.email, profile.contact, profile.logo_path),
		)
	return profile
