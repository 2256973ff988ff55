"""Services for users, messages, the clinic system gateway and appointments."""