"""Canned responses and LLM system prompts."""

from base_template.config import BUSINESS

PHONE = BUSINESS["phone"]

BOOKING_RESPONSE = (
    "I'd be happy to help you schedule your mobile detailing service! For the fastest "
    f"booking and to check our real-time availability, please call us at {PHONE}. Our "
    "team can provide exact pricing based on your vehicle and location, and we often have "
    "same-day or next-day availability. We serve all of Los Angeles and Orange County, "
    "bringing our professional equipment directly to your location."
)

PRICING_RESPONSE = (
    "Our mobile detailing pricing starts around $70 for basic exterior packages, with full "
    "detail packages priced based on your vehicle's size and condition. We offer "
    "comprehensive packages including Jay's Max Detail, paint correction, ceramic coating, "
    "and interior deep cleaning. For an accurate quote tailored to your specific vehicle "
    f"and needs, please call {PHONE}. We'll provide exact pricing and can often schedule "
    "your service for the same day or next day!"
)

SERVICES_RESPONSE = (
    "Jay's Mobile Wash offers comprehensive mobile detailing services including exterior "
    "detailing, interior deep cleaning, paint correction, and ceramic coating applications. "
    "We specialize in luxury and exotic vehicles, using premium products like Koch Chemie "
    "and BioBomb odor elimination. Our services include full detail packages, spot-free "
    "washing, interior protection, and our signature Jay's Max Detail treatment. Call "
    f"{PHONE} to discuss which services would be perfect for your vehicle!"
)

LOCATION_RESPONSE = (
    "We provide mobile detailing services throughout Los Angeles County and Orange County, "
    "including Beverly Hills, Santa Monica, Newport Beach, Irvine, Anaheim, Long Beach, "
    "Pasadena, and surrounding areas. We bring our professional equipment and supplies "
    "directly to your location - whether that's your home, office, or anywhere convenient "
    f"for you. Call {PHONE} to confirm we serve your specific area and to schedule your "
    "mobile detail!"
)

CALL_TO_ACTION = f"For more details or to schedule your service, please call us at {PHONE}!"

APOLOGY_RESPONSE = (
    "I'm having trouble connecting right now. Please call us directly at "
    f"{PHONE} for immediate assistance with your mobile detailing needs!"
)

ASSISTANT_SYSTEM = f"""You are the customer assistant for {BUSINESS["name"]}, a premium mobile car
detailing service serving Los Angeles and Orange County.

Guidelines:
- Answer questions about car care, detailing, ceramic coating and paint correction accurately and briefly
- Never invent prices, dates or availability; direct customers to call {PHONE} for quotes and booking
- Keep answers to 2-4 sentences and stay friendly and professional"""
