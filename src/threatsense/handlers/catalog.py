"""Built-in handler descriptors, one per known event type plus the fallback."""

from typing import Dict

from threatsense.core.severity import Severity
from threatsense.handlers.base import HandlerDescriptor, ThreatEventType

ROOTED_DEVICE_HANDLER = HandlerDescriptor(
    event_type=ThreatEventType.ROOTED_DEVICE.value,
    severity=Severity.HIGH,
    title="Rooted Device Detected",
    description=(
        "A rooted device bypasses normal Android security controls, potentially exposing "
        "sensitive data and allowing unauthorized modifications."
    ),
    user_guidance=(
        "For security reasons, this app cannot run on rooted devices. Please use a "
        "non-rooted device to access the application."
    ),
    recommended_actions=(
        "Exit the application immediately",
        "Use a non-rooted device",
        "Contact support if this appears to be an error",
        "Log security incident for review",
    ),
)

UNKNOWN_SOURCES_ENABLED_HANDLER = HandlerDescriptor(
    event_type=ThreatEventType.UNKNOWN_SOURCES_ENABLED.value,
    severity=Severity.MEDIUM,
    title="Unknown Sources Installation Enabled",
    description=(
        "The 'Install from Unknown Sources' setting is enabled, which allows installation of "
        "apps from outside the Google Play Store, potentially including malicious applications."
    ),
    user_guidance=(
        "Please disable 'Install from Unknown Sources' in your device settings to improve security."
    ),
    recommended_actions=(
        "Go to Settings > Security",
        "Disable 'Unknown Sources' or 'Install unknown apps'",
        "Only install apps from trusted sources like Google Play Store",
        "Review recently installed apps",
    ),
)

SSL_CERTIFICATE_VALIDATION_FAILED_HANDLER = HandlerDescriptor(
    event_type=ThreatEventType.SSL_CERTIFICATE_VALIDATION_FAILED.value,
    severity=Severity.HIGH,
    title="SSL Certificate Validation Failed",
    description=(
        "SSL certificate validation has failed, indicating a potential man-in-the-middle "
        "attack or compromised connection."
    ),
    user_guidance=(
        "A secure connection could not be established. Your data may be at risk. Please "
        "check your network connection and try again on a trusted network."
    ),
    recommended_actions=(
        "Disconnect from current network",
        "Connect to a trusted network",
        "Avoid entering sensitive information",
        "Contact IT support if on corporate network",
        "Check for proxy or VPN interference",
    ),
)

SSL_NON_SSL_CONNECTION_HANDLER = HandlerDescriptor(
    event_type=ThreatEventType.SSL_NON_SSL_CONNECTION.value,
    severity=Severity.HIGH,
    title="Unencrypted Connection Detected",
    description=(
        "An unencrypted (non-SSL/TLS) connection has been detected. Data transmitted over "
        "this connection is vulnerable to interception."
    ),
    user_guidance=(
        "Your data is being transmitted without encryption and could be intercepted. "
        "Please ensure you're using a secure connection."
    ),
    recommended_actions=(
        "Ensure HTTPS/SSL is enabled",
        "Check network configuration",
        "Avoid transmitting sensitive data",
        "Use VPN if on public network",
        "Contact support if issue persists",
    ),
)

SSL_INCOMPATIBLE_VERSION_HANDLER = HandlerDescriptor(
    event_type=ThreatEventType.SSL_INCOMPATIBLE_VERSION.value,
    severity=Severity.MEDIUM,
    title="Incompatible SSL Version",
    description=(
        "An incompatible or outdated SSL/TLS version has been detected, which may be "
        "vulnerable to known security exploits."
    ),
    user_guidance=(
        "Your connection is using an outdated encryption method that may not be secure. "
        "Please update your device or contact support."
    ),
    recommended_actions=(
        "Update your device's operating system",
        "Check for app updates",
        "Use a different network if possible",
        "Contact support for assistance",
        "Avoid sensitive transactions until resolved",
    ),
)

NETWORK_PROXY_CONFIGURED_HANDLER = HandlerDescriptor(
    event_type=ThreatEventType.NETWORK_PROXY_CONFIGURED.value,
    severity=Severity.MEDIUM,
    title="Network Proxy Detected",
    description=(
        "A network proxy has been configured on this device, which could potentially "
        "intercept or monitor network traffic."
    ),
    user_guidance=(
        "A network proxy is configured on your device. If you didn't set this up "
        "intentionally, it could be a security risk."
    ),
    recommended_actions=(
        "Review proxy settings in device configuration",
        "Disable proxy if not intentionally configured",
        "Check for unauthorized network configuration changes",
        "Use direct connection when possible",
        "Contact IT support if on corporate network",
    ),
)

DEBUGGER_THREAT_DETECTED_HANDLER = HandlerDescriptor(
    event_type=ThreatEventType.DEBUGGER_THREAT_DETECTED.value,
    severity=Severity.HIGH,
    title="Debugger Attached",
    description=(
        "A debugger has been attached to the application, which could be used for reverse "
        "engineering or code manipulation."
    ),
    user_guidance=(
        "A debugging tool has been detected. For security reasons, the application cannot "
        "run while debugging tools are active."
    ),
    recommended_actions=(
        "Close any debugging or development tools",
        "Restart the application",
        "Use the production version of the app",
        "Contact support if this appears incorrectly",
        "Scan device for potentially unwanted programs",
    ),
)

APP_IS_DEBUGGABLE_HANDLER = HandlerDescriptor(
    event_type=ThreatEventType.APP_IS_DEBUGGABLE.value,
    severity=Severity.MEDIUM,
    title="App in Debuggable State",
    description=(
        "The application is running in a debuggable state, which exposes additional attack "
        "vectors and debugging capabilities."
    ),
    user_guidance=(
        "This app version has debugging enabled, which may pose security risks. Please use "
        "the production version of the app."
    ),
    recommended_actions=(
        "Download the production version from official app store",
        "Avoid entering sensitive information",
        "Contact support for the correct app version",
        "Remove any development/beta versions",
        "Check app installation source",
    ),
)

APP_INTEGRITY_ERROR_HANDLER = HandlerDescriptor(
    event_type=ThreatEventType.APP_INTEGRITY_ERROR.value,
    severity=Severity.CRITICAL,
    title="App Integrity Compromised",
    description=(
        "The application binary has been modified or tampered with, indicating a potential "
        "security breach or malware infection."
    ),
    user_guidance=(
        "CRITICAL SECURITY WARNING: This app has been tampered with and cannot be trusted. "
        "Do not proceed with using this application."
    ),
    recommended_actions=(
        "IMMEDIATELY exit the application",
        "Uninstall the compromised app",
        "Download from official app store only",
        "Scan device for malware",
        "Change any passwords used with this app",
        "Report incident to security team",
    ),
)

EMULATOR_FOUND_HANDLER = HandlerDescriptor(
    event_type=ThreatEventType.EMULATOR_FOUND.value,
    severity=Severity.LOW,
    title="Emulator Environment Detected",
    description=(
        "The application is running in an emulated environment rather than on a physical device."
    ),
    user_guidance=(
        "This app is designed to run on physical devices only. Please install and run on an "
        "actual mobile device."
    ),
    recommended_actions=(
        "Use a physical Android device",
        "Install the app from Google Play Store",
        "Contact support if you believe this is an error",
        "Check if device passes Google SafetyNet",
        "Avoid sensitive operations on emulated devices",
    ),
)

GOOGLE_EMULATOR_DETECTED_HANDLER = HandlerDescriptor(
    event_type=ThreatEventType.GOOGLE_EMULATOR_DETECTED.value,
    severity=Severity.LOW,
    title="Google Emulator Detected",
    description=(
        "The application is running on Google's Android emulator, which is typically used "
        "for development and testing purposes."
    ),
    user_guidance=(
        "This app is running on Google's emulator. For the best experience and security, "
        "please use a physical device."
    ),
    recommended_actions=(
        "Switch to a physical Android device",
        "Download the production app from Google Play Store",
        "Contact support if needed for development access",
        "Use device for testing purposes only",
        "Avoid production data on emulated devices",
    ),
)

# Not registered by default; hosts that want it call registry.register().
DEVELOPER_OPTIONS_ENABLED_HANDLER = HandlerDescriptor(
    event_type=ThreatEventType.DEVELOPER_OPTIONS_ENABLED.value,
    severity=Severity.MEDIUM,
    title="Developer Options Enabled",
    description=(
        "Android Developer Options are enabled on this device, which exposes debugging "
        "capabilities and development features that could be exploited by malicious "
        "applications or attackers."
    ),
    user_guidance=(
        "Please disable Developer Options in your device settings to improve security unless "
        "you are actively developing applications."
    ),
    recommended_actions=(
        "Go to Settings > About Phone",
        "Stop tapping 'Build Number' to keep Developer Options hidden",
        "If Developer Options are visible, go to Settings > Developer Options",
        "Toggle 'Developer Options' to OFF",
        "Disable 'USB Debugging' if it's enabled",
        "Restart your device to ensure changes take effect",
    ),
)

DEFAULT_HANDLER = HandlerDescriptor(
    event_type=None,
    severity=Severity.MEDIUM,
    title="Security Threat Detected",
    description=(
        "A security threat has been detected on your device. The specific threat type may "
        "not be recognized by this version of the app."
    ),
    user_guidance=(
        "A security issue has been identified. Please follow the recommended actions and "
        "consider updating the app if available."
    ),
    recommended_actions=(
        "Update the app to the latest version",
        "Review device security settings",
        "Contact support for assistance",
        "Avoid sensitive operations until resolved",
        "Consider restarting the device",
    ),
)

BUILTIN_HANDLERS: Dict[str, HandlerDescriptor] = {
    handler.event_type: handler
    for handler in (
        ROOTED_DEVICE_HANDLER,
        UNKNOWN_SOURCES_ENABLED_HANDLER,
        SSL_CERTIFICATE_VALIDATION_FAILED_HANDLER,
        SSL_NON_SSL_CONNECTION_HANDLER,
        SSL_INCOMPATIBLE_VERSION_HANDLER,
        NETWORK_PROXY_CONFIGURED_HANDLER,
        DEBUGGER_THREAT_DETECTED_HANDLER,
        APP_IS_DEBUGGABLE_HANDLER,
        APP_INTEGRITY_ERROR_HANDLER,
        EMULATOR_FOUND_HANDLER,
        GOOGLE_EMULATOR_DETECTED_HANDLER,
    )
}
