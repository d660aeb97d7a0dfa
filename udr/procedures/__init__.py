"""Data repository procedures grouped by resource: registrations, authentication, session management, subscription and provisioned data, EE, SDM and data-change subscriptions, and influence data."""