from rest_framework.throttling import AnonRateThrottle


class LoginThrottle(AnonRateThrottle):
    scope = 'login'


class PublicCandidateThrottle(AnonRateThrottle):
    scope = 'public_candidate'


class WhatsAppWebhookThrottle(AnonRateThrottle):
    scope = 'whatsapp_webhook'
